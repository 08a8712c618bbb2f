"""
Tests des exceptions metier et de leur rendu HTTP.
"""
import asyncio
import json
import pytest
from decimal import Decimal
from unittest.mock import MagicMock

from sqlalchemy.exc import OperationalError
from sqlalchemy.orm.exc import StaleDataError
from starlette.exceptions import HTTPException as StarletteHTTPException

from restopos.core.exceptions import (
    AppException,
    EmptyCart,
    IngredientNotFound,
    InsufficientStock,
    InvalidOrderTransition,
    TableOccupied,
)
from restopos.middleware.exception_handler import (
    app_exception_handler,
    generic_exception_handler,
    http_exception_handler,
    stale_data_handler,
)


def render(handler, exc):
    request = MagicMock()
    request.state.request_id = "req-1"
    response = asyncio.run(handler(request, exc))
    return response.status_code, json.loads(response.body)


class TestExceptions:

    @pytest.mark.unit
    def test_not_found_carries_id(self):
        exc = IngredientNotFound(12)

        assert exc.status_code == 404
        assert exc.to_dict() == {
            "error": "INGREDIENT_NOT_FOUND",
            "message": "Ingredient 12 not found",
            "details": {"id": 12},
        }

    @pytest.mark.unit
    def test_insufficient_stock_details(self):
        exc = InsufficientStock(3, Decimal("5"), Decimal("2.5"), "kitchen")

        assert exc.status_code == 409
        assert exc.details == {
            "ingredient_id": 3,
            "requested": "5",
            "available": "2.5",
            "location": "kitchen",
        }

    @pytest.mark.unit
    def test_hierarchy(self):
        assert issubclass(EmptyCart, AppException)
        assert EmptyCart.status_code == 422
        assert TableOccupied(1, 9).status_code == 409
        assert InvalidOrderTransition(4, "completed", "cancel").details["action"] == "cancel"


class TestHandlers:

    @pytest.mark.unit
    def test_app_exception_rendered_with_request_id(self):
        status, body = render(app_exception_handler, TableOccupied(2, 7))

        assert status == 409
        assert body["error"] == "TABLE_OCCUPIED"
        assert body["details"] == {"table_id": 2, "current_order_id": 7}
        assert body["request_id"] == "req-1"

    @pytest.mark.unit
    def test_stale_data_rendered_as_inconsistent_state(self):
        status, body = render(stale_data_handler, StaleDataError("version mismatch"))

        assert status == 409
        assert body["error"] == "INCONSISTENT_STATE"

    @pytest.mark.unit
    @pytest.mark.parametrize("status_code, error_code", [
        (404, "NOT_FOUND"),
        (405, "METHOD_NOT_ALLOWED"),
        (400, "HTTP_ERROR"),
    ])
    def test_routing_errors(self, status_code, error_code):
        status, body = render(http_exception_handler, StarletteHTTPException(status_code, "nope"))

        assert status == status_code
        assert body == {"error": error_code, "message": "nope", "request_id": "req-1"}

    @pytest.mark.unit
    def test_unhandled_database_error_is_503_without_details(self):
        status, body = render(generic_exception_handler, OperationalError("SELECT 1", {}, Exception("db down")))

        assert status == 503
        assert body["error"] == "SERVICE_UNAVAILABLE"
        assert "db down" not in body["message"]

    @pytest.mark.unit
    def test_unhandled_error_is_500(self):
        status, body = render(generic_exception_handler, RuntimeError("secret"))

        assert status == 500
        assert body["error"] == "INTERNAL_ERROR"
        assert "secret" not in body["message"]
