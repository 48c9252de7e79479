"""
Cognito user pool access for sign-up and sign-in.

Users are created with the admin API so the caller-chosen password can be
made permanent immediately and no invitation message is sent.
"""

from typing import Any, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from restaurant_service.handlers.utils.errors import (
    AuthenticationFailedError,
    ErrorContext,
    InvalidCredentialsError,
    SignupFailedError,
    UserAlreadyExistsError,
)
from restaurant_service.handlers.utils.observability import logger, tracer


class CognitoIdentityHandler:
    """User directory backed by a Cognito user pool."""

    def __init__(
        self,
        user_pool_id: str,
        client_id: str,
        region_name: Optional[str] = None,
        client: Optional[Any] = None,
    ) -> None:
        """
        Initialize the identity handler.

        Args:
            user_pool_id: Cognito user pool id
            client_id: App client id allowed to run ADMIN_USER_PASSWORD_AUTH
            region_name: AWS region name
            client: Preconfigured ``cognito-idp`` client
        """
        self.user_pool_id = user_pool_id
        self.client_id = client_id
        if client is None:
            client = boto3.client('cognito-idp', region_name=region_name) if region_name else boto3.client('cognito-idp')
        self.client = client

    @tracer.capture_method
    def sign_up(
        self,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
        context: Optional[ErrorContext] = None,
    ) -> None:
        """
        Register a confirmed user with a permanent password.

        Raises:
            UserAlreadyExistsError: If the email is already registered
            SignupFailedError: If Cognito rejects the request for any other reason
        """
        try:
            self.client.admin_create_user(
                UserPoolId=self.user_pool_id,
                Username=email,
                UserAttributes=[
                    {'Name': 'given_name', 'Value': first_name},
                    {'Name': 'family_name', 'Value': last_name},
                    {'Name': 'email', 'Value': email},
                    {'Name': 'email_verified', 'Value': 'true'},
                ],
                TemporaryPassword=password,
                MessageAction='SUPPRESS',
            )
            self.client.admin_set_user_password(
                UserPoolId=self.user_pool_id,
                Username=email,
                Password=password,
                Permanent=True,
            )
        except ClientError as e:
            error_code = e.response['Error']['Code']
            if error_code == 'UsernameExistsException':
                raise UserAlreadyExistsError(email=email, context=context) from e
            logger.error('Cognito sign-up failed', extra={'error_code': error_code, 'error': str(e)})
            raise SignupFailedError(message=f'Cognito error: {error_code}', context=context) from e
        except BotoCoreError as e:
            logger.error('Cognito sign-up connection error', extra={'error': str(e)})
            raise SignupFailedError(message=f'Cognito connection error: {e}', context=context) from e

        logger.info('User created', extra={'username': email})

    @tracer.capture_method
    def sign_in(self, email: str, password: str, context: Optional[ErrorContext] = None) -> str:
        """
        Authenticate a user and return the Cognito id token.

        Raises:
            InvalidCredentialsError: If the email/password pair is rejected
            AuthenticationFailedError: If authentication fails for any other reason
        """
        try:
            response = self.client.admin_initiate_auth(
                AuthFlow='ADMIN_USER_PASSWORD_AUTH',
                UserPoolId=self.user_pool_id,
                ClientId=self.client_id,
                AuthParameters={
                    'USERNAME': email,
                    'PASSWORD': password,
                },
            )
        except ClientError as e:
            error_code = e.response['Error']['Code']
            if error_code == 'NotAuthorizedException':
                raise InvalidCredentialsError(context=context) from e
            logger.error('Cognito sign-in failed', extra={'error_code': error_code, 'error': str(e)})
            raise AuthenticationFailedError(message=f'Cognito error: {error_code}', context=context) from e
        except BotoCoreError as e:
            logger.error('Cognito sign-in connection error', extra={'error': str(e)})
            raise AuthenticationFailedError(message=f'Cognito connection error: {e}', context=context) from e

        result = response.get('AuthenticationResult')
        if not result:
            # A challenge (e.g. NEW_PASSWORD_REQUIRED) came back instead of tokens
            logger.error('AuthenticationResult is missing in response', extra={
                'challenge_name': response.get('ChallengeName'),
            })
            raise AuthenticationFailedError(
                message='No AuthenticationResult in Cognito response',
                user_message='Authentication failed. Try again.',
                context=context,
            )

        return result['IdToken']
