"""Tests for the response envelope."""

from storefront.application.responses import failure, respond, status_code_for, success
from storefront.domain.exceptions import (
    EntityNotFoundError,
    InsufficientStockError,
    MissingFieldsError,
    PersistenceError,
    ProductNotFoundError,
    ValidationError,
)


class TestStatusCodes:

    def test_mapping(self):
        assert status_code_for(ValidationError("bad")) == 400
        assert status_code_for(MissingFieldsError(["items"])) == 400
        assert status_code_for(InsufficientStockError("Laptop", 3, 1)) == 400
        assert status_code_for(ProductNotFoundError("Laptop")) == 400
        assert status_code_for(EntityNotFoundError("Order ORD-1 not found")) == 404
        assert status_code_for(PersistenceError("disk full")) == 500
        assert status_code_for(RuntimeError("boom")) == 500


class TestEnvelope:

    def test_success(self):
        response = success({"orderNumber": "ORD-000001"}, 201)
        assert response.ok
        assert response.status_code == 201
        assert response.body == {"success": True, "data": {"orderNumber": "ORD-000001"}}

    def test_validation_failure_names_field(self):
        response = failure(
            ValidationError("Unsupported payment method", field="paymentMethod"),
            "Failed to create order",
        )
        assert not response.ok
        assert response.body == {
            "success": False,
            "error": "Validation failed",
            "message": "Unsupported payment method",
            "field": "paymentMethod",
        }

    def test_missing_fields_lists_them(self):
        response = failure(MissingFieldsError(["customer.email"]), "Failed to create order")
        assert response.body["error"] == "Missing required fields"
        assert response.body["fields"] == ["customer.email"]
        assert response.body["message"].startswith(
            "Customer, shipping address, items, and payment method are required"
        )

    def test_insufficient_stock_reports_available(self):
        response = failure(InsufficientStockError("Laptop", 3, 1), "Failed to create order")
        assert response.body["message"] == "Insufficient stock for product Laptop. Available: 1"
        assert response.body["available"] == 1

    def test_persistence_failure_surfaces_underlying_message(self):
        response = failure(PersistenceError("disk full"), "Failed to create order")
        assert response.status_code == 500
        assert response.body["error"] == "Failed to create order"
        assert response.body["message"] == "disk full"

    def test_detail_only_when_exposed(self):
        exc = RuntimeError("boom")
        hidden = failure(exc, "Failed to create order")
        shown = failure(exc, "Failed to create order", expose_detail=True)
        assert "detail" not in hidden.body
        assert shown.body["detail"]["type"] == "RuntimeError"
        assert any("boom" in line for line in shown.body["detail"]["trace"])


class TestRespond:

    def test_wraps_result(self):
        response = respond(lambda: {"id": 1}, "Failed", success_status=201)
        assert response.status_code == 201
        assert response.body["data"] == {"id": 1}

    def test_wraps_domain_error(self):
        def action():
            raise EntityNotFoundError("Order ORD-000404 not found")

        response = respond(action, "Failed to fetch order")
        assert response.status_code == 404
        assert response.body["error"] == "Not found"

    def test_wraps_unexpected_error(self):
        def action():
            raise KeyError("items")

        response = respond(action, "Failed to create order", expose_detail=True)
        assert response.status_code == 500
        assert response.body["error"] == "Failed to create order"
        assert response.body["detail"]["type"] == "KeyError"
