"""
Integration tests for the booking API handler.

Requests are resolved through the API Gateway resolver against DynamoDB
(mocked with moto); the Cognito-backed account operations use a mock
identity handler.
"""

import itertools
import json
import random
import pytest
from typing import Any, Dict
from unittest.mock import Mock

from restaurant_service.handlers import api_handler
from restaurant_service.handlers.api_handler import create_app
from restaurant_service.handlers.utils.errors import InvalidCredentialsError, SlotConflictError, UserAlreadyExistsError
from restaurant_service.logic import AccountService, ReservationService, TableService
from restaurant_service.logic.conflict_checker import slots_overlap
from restaurant_service.models.input import CreateReservationRequest
from restaurant_service.models.reservation import Reservation
from restaurant_service.models.table import Table

CONFLICT_MESSAGE = "Table is already reserved for the selected date and time"


def _body(response: Dict[str, Any]) -> Any:
    return json.loads(response["body"])


def _header(response: Dict[str, Any], name: str) -> str:
    if "multiValueHeaders" in response:
        return response["multiValueHeaders"][name][0]
    return response["headers"][name]


@pytest.fixture
def identity():
    identity = Mock()
    identity.sign_in.return_value = "id-token"
    return identity


@pytest.fixture
def app(dal, identity):
    return create_app(
        table_service=TableService(dal),
        reservation_service=ReservationService(dal),
        account_service=AccountService(identity),
    )


@pytest.fixture
def call(app, make_api_event, lambda_context):
    def invoke(http_method: str, path: str, body: Any = None, username: str = "jane@example.com", **kwargs):
        return app.resolve(make_api_event(http_method, path, body=body, username=username, **kwargs), lambda_context)

    return invoke


@pytest.fixture
def table_one(call):
    response = call("POST", "/tables", {"id": 1, "number": 5, "places": 4, "isVip": False, "minOrder": 0})
    assert response["statusCode"] == 200
    return response


def _booking(start: str, end: str, table_number: int = 5, date: str = "2024-06-01") -> Dict[str, Any]:
    return {
        "tableNumber": table_number,
        "date": date,
        "slotTimeStart": start,
        "slotTimeEnd": end,
        "clientName": "Jane Doe",
        "phoneNumber": "+380501234567",
    }


@pytest.mark.integration
class TestTables:
    """Table operations through the API."""

    def test_create_table_echoes_id(self, table_one):
        assert _body(table_one) == {"id": 1}

    def test_get_table(self, call, table_one):
        response = call("GET", "/tables/1")

        assert response["statusCode"] == 200
        assert _body(response) == {"id": 1, "number": 5, "places": 4, "isVip": False, "minOrder": 0}

    def test_get_missing_table(self, call):
        response = call("GET", "/tables/42")

        assert response["statusCode"] == 404
        assert _body(response) == {"message": "Table not found"}

    def test_list_tables(self, call, table_one):
        call("POST", "/tables", {"number": 6, "places": 2, "isVip": True, "minOrder": 250})

        response = call("GET", "/tables")

        assert response["statusCode"] == 200
        tables = _body(response)["tables"]
        assert sorted(table["number"] for table in tables) == [5, 6]
        assert {"id": 1, "number": 5, "places": 4, "isVip": False, "minOrder": 0} in tables

    def test_create_table_missing_fields(self, call):
        response = call("POST", "/tables", {"number": 5})

        assert response["statusCode"] == 400
        assert _body(response) == {"message": "Table number, capacity, and location are required"}

    def test_create_table_wrong_type(self, call):
        response = call("POST", "/tables", {"number": "5", "places": 4, "isVip": False})

        assert response["statusCode"] == 400

    def test_non_ascii_digit_id_stays_text(self, call):
        created = call("POST", "/tables", {"id": "²", "number": 7, "places": 2, "isVip": False})
        assert created["statusCode"] == 200
        assert _body(created) == {"id": "²"}

        listed = call("GET", "/tables")
        assert listed["statusCode"] == 200
        assert [table["id"] for table in _body(listed)["tables"]] == ["²"]

        fetched = call("GET", "/tables/²")
        assert fetched["statusCode"] == 200
        assert _body(fetched)["id"] == "²"


@pytest.mark.integration
class TestReservations:
    """Reservation operations through the API."""

    def test_booking_flow_with_conflicts(self, call, table_one):
        first = call("POST", "/reservations", _booking("18:00", "19:00"))
        assert first["statusCode"] == 200
        first_body = _body(first)
        assert first_body["message"] == "Reservation created successfully"
        assert first_body["reservationId"]

        overlapping = call("POST", "/reservations", _booking("18:30", "19:30"))
        assert overlapping["statusCode"] == 400
        assert _body(overlapping) == {"message": CONFLICT_MESSAGE}

        # Touching the end boundary conflicts
        touching = call("POST", "/reservations", _booking("19:00", "20:00"))
        assert touching["statusCode"] == 400
        assert _body(touching) == {"message": CONFLICT_MESSAGE}

        later = call("POST", "/reservations", _booking("20:30", "21:00"))
        assert later["statusCode"] == 200
        assert _body(later)["reservationId"] != first_body["reservationId"]

    def test_unknown_table_number(self, call, table_one):
        response = call("POST", "/reservations", _booking("18:00", "19:00", table_number=99))

        assert response["statusCode"] == 400
        assert _body(response) == {"message": "Table not found"}

    def test_missing_fields(self, call, table_one):
        response = call("POST", "/reservations", {"tableNumber": 5, "date": "2024-06-01"})

        assert response["statusCode"] == 400
        assert _body(response) == {"message": "Table number, date, slotTimeStart, and slotTimeEnd are required"}

    def test_missing_date_makes_no_store_calls(self, make_api_event, lambda_context):
        dal = Mock()
        app = create_app(
            table_service=TableService(dal),
            reservation_service=ReservationService(dal),
            account_service=Mock(),
        )
        body = _booking("18:00", "19:00")
        del body["date"]

        response = app.resolve(make_api_event("POST", "/reservations", body=body, username="jane@example.com"), lambda_context)

        assert response["statusCode"] == 400
        assert _body(response) == {"message": "Table number, date, slotTimeStart, and slotTimeEnd are required"}
        assert dal.mock_calls == []

    def test_malformed_slot_time(self, call, table_one):
        response = call("POST", "/reservations", _booking("6pm", "19:00"))

        assert response["statusCode"] == 400

    def test_invalid_json_body(self, call):
        response = call("POST", "/reservations", "{not json")

        assert response["statusCode"] == 400
        assert _body(response) == {"message": "Table number, date, slotTimeStart, and slotTimeEnd are required"}

    def test_requires_caller_identity(self, call, table_one):
        response = call("POST", "/reservations", _booking("18:00", "19:00"), username=None)

        assert response["statusCode"] == 401
        assert _body(response) == {"message": "Unauthorized"}

    def test_list_reservations(self, call, table_one):
        call("POST", "/reservations", _booking("12:00", "13:00"))
        call("POST", "/reservations", _booking("18:00", "19:00"), username="john@example.com")

        everyone = call("GET", "/reservations")
        assert everyone["statusCode"] == 200
        assert len(_body(everyone)["reservations"]) == 2

        johns = call("GET", "/reservations", query={"user": "john@example.com"})
        reservations = _body(johns)["reservations"]
        assert reservations == [{
            "tableNumber": 5,
            "clientName": "Jane Doe",
            "phoneNumber": "+380501234567",
            "date": "2024-06-01",
            "slotTimeStart": "18:00",
            "slotTimeEnd": "19:00",
        }]

    def test_repeated_conflicting_request_changes_nothing(self, call, dal, table_one):
        call("POST", "/reservations", _booking("18:00", "19:00"))

        first = call("POST", "/reservations", _booking("18:30", "19:30"), username="john@example.com")
        again = call("POST", "/reservations", _booking("18:30", "19:30"), username="john@example.com")

        assert first["statusCode"] == again["statusCode"] == 400
        assert _body(first) == _body(again) == {"message": CONFLICT_MESSAGE}
        assert len(dal.list_reservations()) == 1

    @pytest.mark.parametrize("date, start, end, status", [
        ("2024-06-02", "18:00", "19:00", 200),
        ("2024-06-01", "20:30", "21:00", 200),
        ("2024-06-01", "18:30", "19:30", 400),
    ])
    def test_booking_landing_between_check_and_write(self, call, dal, table_one, monkeypatch, date, start, end, status):
        list_for_table = dal.list_reservations_for_table
        interleaved = []

        def list_then_book_elsewhere(table_id, requested_date, context=None):
            existing = list_for_table(table_id, requested_date, context=context)
            if not interleaved:
                other = Reservation.create(
                    table_id=table_id,
                    table_number=5,
                    username="john@example.com",
                    date=date,
                    slot_time_start=start,
                    slot_time_end=end,
                )
                interleaved.append(dal.create_reservation_in_db(other, expected_booking_version=0))
            return existing

        monkeypatch.setattr(dal, "list_reservations_for_table", list_then_book_elsewhere)

        response = call("POST", "/reservations", _booking("18:00", "19:00"))

        assert response["statusCode"] == status
        stored = dal.list_reservations()
        if status == 200:
            assert len(stored) == 2
            assert _body(response)["reservationId"] in {reservation.id for reservation in stored}
        else:
            assert _body(response) == {"message": CONFLICT_MESSAGE}
            assert [reservation.id for reservation in stored] == [interleaved[0].id]


@pytest.mark.integration
class TestAdmittedBookings:
    """Sequences of bookings through the reservation service."""

    @staticmethod
    def _random_request(rng: random.Random) -> CreateReservationRequest:
        start = rng.randrange(10 * 60, 22 * 60, 15)
        end = start + rng.choice([0, 15, 30, 60, 90, 120])
        return CreateReservationRequest.model_validate({
            "tableNumber": rng.choice([5, 6]),
            "date": rng.choice(["2024-06-01", "2024-06-02"]),
            "slotTimeStart": f"{start // 60:02d}:{start % 60:02d}",
            "slotTimeEnd": f"{end // 60:02d}:{end % 60:02d}",
        })

    @pytest.mark.parametrize("seed", [1, 7, 42])
    def test_admitted_pairs_never_overlap(self, dal, error_context, seed):
        dal.create_table_in_db(Table.create(number=5, places=4, is_vip=False, table_id="1"))
        dal.create_table_in_db(Table.create(number=6, places=2, is_vip=True, table_id="2"))
        service = ReservationService(dal)
        rng = random.Random(seed)

        rejected = []
        for _ in range(40):
            request = self._random_request(rng)
            try:
                service.create_reservation(request, "jane@example.com", error_context)
            except SlotConflictError:
                rejected.append(request)

        admitted = dal.list_reservations()
        assert admitted
        for first, second in itertools.combinations(admitted, 2):
            if (first.table_id, first.date) == (second.table_id, second.date):
                assert not slots_overlap(first.start, first.end, second.start, second.end)

        # Every rejection is explained by an admitted booking
        for request in rejected:
            assert any(
                reservation.table_number == request.table_number
                and reservation.date == request.date
                and slots_overlap(reservation.start, reservation.end, request.start, request.end)
                for reservation in admitted
            )


@pytest.mark.integration
class TestAccounts:
    """Sign-up and sign-in through the API."""

    @staticmethod
    def _signup(**overrides):
        body = {
            "firstName": "Jane",
            "lastName": "Doe",
            "email": "jane.doe@example.com",
            "password": "Str0ngPassw0rd$",
        }
        body.update(overrides)
        return body

    def test_signup(self, call, identity):
        response = call("POST", "/signup", self._signup(), username=None)

        assert response["statusCode"] == 200
        assert _body(response) == {"message": "User created successfully."}
        identity.sign_up.assert_called_once()

    def test_signup_invalid_email(self, call, identity):
        response = call("POST", "/signup", self._signup(email="jane.doe"), username=None)

        assert response["statusCode"] == 400
        assert _body(response) == {"error": "Invalid email format."}
        identity.sign_up.assert_not_called()

    def test_signup_invalid_password(self, call):
        response = call("POST", "/signup", self._signup(password="short"), username=None)

        assert response["statusCode"] == 400
        assert _body(response) == {"error": "Invalid password format."}

    def test_signup_missing_fields(self, call):
        response = call("POST", "/signup", {"email": "jane.doe@example.com"}, username=None)

        assert response["statusCode"] == 400
        assert _body(response) == {"error": "All fields are required."}

    def test_signup_existing_email(self, call, identity):
        identity.sign_up.side_effect = UserAlreadyExistsError(email="jane.doe@example.com")

        response = call("POST", "/signup", self._signup(), username=None)

        assert response["statusCode"] == 400
        assert _body(response) == {"error": "Email already exists."}

    def test_signin(self, call):
        response = call("POST", "/signin", {"email": "jane.doe@example.com", "password": "Str0ngPassw0rd$"}, username=None)

        assert response["statusCode"] == 200
        assert _body(response) == {"idToken": "id-token"}

    def test_signin_missing_fields(self, call):
        response = call("POST", "/signin", {"email": "jane.doe@example.com"}, username=None)

        assert response["statusCode"] == 400
        assert _body(response) == {"error": "Email and password are required."}

    def test_signin_rejected(self, call, identity):
        identity.sign_in.side_effect = InvalidCredentialsError()

        response = call("POST", "/signin", {"email": "jane.doe@example.com", "password": "wrong"}, username=None)

        assert response["statusCode"] == 400
        assert _body(response) == {"error": "Invalid email or password."}


@pytest.mark.integration
class TestResponses:
    """Routing and response shape."""

    def test_unknown_route(self, call):
        response = call("GET", "/menu")

        assert response["statusCode"] == 404
        assert _body(response) == {"message": "Not Found"}

    def test_cors_headers_on_success_and_error(self, call):
        for response in (call("GET", "/tables"), call("GET", "/tables/missing"), call("GET", "/menu")):
            assert _header(response, "Access-Control-Allow-Origin") == "*"
            assert _header(response, "Access-Control-Allow-Methods") == "*"
            assert _header(response, "Content-Type") == "application/json"

    def test_unexpected_error_returns_500(self, make_api_event, lambda_context):
        table_service = Mock()
        table_service.list_tables.side_effect = RuntimeError("boom")
        app = create_app(table_service=table_service, reservation_service=Mock(), account_service=Mock())

        response = app.resolve(make_api_event("GET", "/tables", username="jane@example.com"), lambda_context)

        assert response["statusCode"] == 500
        assert _body(response) == {"message": "Internal Server Error"}

    def test_store_failure_returns_500(self, make_api_event, lambda_context):
        from restaurant_service.dal.dynamodb_handler import DALError

        table_service = Mock()
        table_service.list_tables.side_effect = DALError(message="DynamoDB error", operation="Scan", table_name="t")
        app = create_app(table_service=table_service, reservation_service=Mock(), account_service=Mock())

        response = app.resolve(make_api_event("GET", "/tables", username="jane@example.com"), lambda_context)

        assert response["statusCode"] == 500
        assert _body(response) == {"message": "Internal Server Error"}


@pytest.mark.integration
def test_lambda_handler_builds_app_from_environment(monkeypatch, dynamodb_tables, make_api_event, lambda_context):
    monkeypatch.setattr(api_handler, "_app", None)

    response = api_handler.lambda_handler(make_api_event("GET", "/tables", username="jane@example.com"), lambda_context)

    assert response["statusCode"] == 200
    assert _body(response) == {"tables": []}
    assert api_handler._app is not None


@pytest.mark.integration
def test_lambda_entry_point_delegates(monkeypatch, dynamodb_tables, make_api_event, lambda_context):
    from api_handler.lambda_function import lambda_handler

    monkeypatch.setattr(api_handler, "_app", None)

    response = lambda_handler(make_api_event("GET", "/menu", username="jane@example.com"), lambda_context)

    assert response["statusCode"] == 404
