"""
Invoice Manager Backend — Invoice Route Tests
===============================================

What:  End-to-end tests of the invoice endpoints through the ASGI app.
How:   HTTPX AsyncClient posts url-encoded forms; the session dependency is
       overridden with the in-memory SQLite session from conftest.

What we test:
    ✅ Saved create/edit answer 303 → /dashboard/invoices
    ✅ Field errors answer 400 with {errors, message}
    ✅ Storage failures answer 500 with only the generic message
    ✅ Delete answers 200 {"message": "Deleted Invoice."} (POST and DELETE)
    ✅ The list view is cached until a mutation revalidates it
"""

from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import OperationalError

from app.database import get_db_session


async def _use_session(session):
    from app.main import app

    async def _override():
        yield session

    app.dependency_overrides[get_db_session] = _override


class TestCreateRoute:

    @pytest.mark.asyncio
    async def test_create_redirects_to_list(self, test_client, fetch_invoices, valid_form):
        response = await test_client.post("/dashboard/invoices", data=valid_form)

        assert response.status_code == 303
        assert response.headers["location"] == "/dashboard/invoices"
        rows = await fetch_invoices()
        assert len(rows) == 1 and rows[0]["amount"] == 4550

    @pytest.mark.asyncio
    async def test_create_with_zero_amount_returns_field_errors(
        self, test_client, fetch_invoices, customer_id
    ):
        response = await test_client.post(
            "/dashboard/invoices",
            data={"customerId": customer_id, "amount": "0", "status": "pending"},
        )

        assert response.status_code == 400
        assert response.json() == {
            "errors": {"amount": ["Please enter an amount greater than $0."]},
            "message": "Missing fields. Failed to create invoice.",
        }
        assert await fetch_invoices() == []

    @pytest.mark.asyncio
    async def test_create_accepts_multipart_forms(self, test_client, fetch_invoices, valid_form):
        response = await test_client.post(
            "/dashboard/invoices",
            data=valid_form,
            files={"attachment": ("note.txt", b"ignored", "text/plain")},
        )

        assert response.status_code == 303
        assert len(await fetch_invoices()) == 1

    @pytest.mark.asyncio
    async def test_create_storage_failure_hides_cause(self, test_client, mock_db_session, valid_form):
        mock_db_session.execute = AsyncMock(
            side_effect=OperationalError("INSERT", {}, Exception("password authentication failed"))
        )
        await _use_session(mock_db_session)

        response = await test_client.post("/dashboard/invoices", data=valid_form)

        assert response.status_code == 500
        assert response.json() == {"message": "Database Error: Failed to Create Invoice."}
        assert "password" not in response.text


class TestUpdateRoute:

    @pytest.mark.asyncio
    async def test_edit_redirects_and_updates(self, test_client, seed_invoice, fetch_invoices):
        invoice_id = await seed_invoice(amount=1000, status="pending")
        customer = "c2"

        response = await test_client.post(
            f"/dashboard/invoices/{invoice_id}/edit",
            data={"customerId": customer, "amount": "12.34", "status": "paid"},
        )

        assert response.status_code == 303
        assert response.headers["location"] == "/dashboard/invoices"
        row = (await fetch_invoices())[0]
        assert (row["customer_id"], row["amount"], row["status"]) == (customer, 1234, "paid")

    @pytest.mark.asyncio
    async def test_edit_with_bad_status_returns_field_errors(
        self, test_client, seed_invoice, customer_id
    ):
        invoice_id = await seed_invoice()

        response = await test_client.post(
            f"/dashboard/invoices/{invoice_id}/edit",
            data={"customerId": customer_id, "amount": "5", "status": "void"},
        )

        assert response.status_code == 400
        body = response.json()
        assert body["errors"] == {"status": ["Please select an invoice status."]}
        assert body["message"] == "Missing Fields. Failed to Update Invoice."


class TestDeleteRoute:

    @pytest.mark.asyncio
    async def test_post_delete_returns_confirmation(self, test_client, seed_invoice, fetch_invoices):
        invoice_id = await seed_invoice()

        response = await test_client.post(f"/dashboard/invoices/{invoice_id}/delete")

        assert response.status_code == 200
        assert response.json() == {"message": "Deleted Invoice."}
        assert await fetch_invoices() == []

    @pytest.mark.asyncio
    async def test_http_delete_unknown_id_succeeds(self, test_client):
        response = await test_client.delete("/dashboard/invoices/x1")

        assert response.status_code == 200
        assert response.json() == {"message": "Deleted Invoice."}

    @pytest.mark.asyncio
    async def test_delete_storage_failure(self, test_client, mock_db_session):
        mock_db_session.execute = AsyncMock(
            side_effect=OperationalError("DELETE", {}, Exception("server closed the connection"))
        )
        await _use_session(mock_db_session)

        response = await test_client.delete("/dashboard/invoices/x1")

        assert response.status_code == 500
        assert response.json() == {"message": "Database Error: Failed to Delete Invoice."}


class TestReadRoutes:

    @pytest.mark.asyncio
    async def test_list_is_cached_until_a_mutation(self, test_client, seed_invoice):
        first_id = await seed_invoice()
        response = await test_client.get("/dashboard/invoices")
        assert response.status_code == 200
        assert response.json()["total_count"] == 1

        # Written behind the handlers' back: the cached view stays stale
        await seed_invoice()
        assert (await test_client.get("/dashboard/invoices")).json()["total_count"] == 1

        await test_client.delete(f"/dashboard/invoices/{first_id}")
        assert (await test_client.get("/dashboard/invoices")).json()["total_count"] == 1

        listing = (await test_client.get("/dashboard/invoices")).json()
        assert first_id not in [invoice["id"] for invoice in listing["invoices"]]

    @pytest.mark.asyncio
    async def test_plain_ids_round_trip_through_the_list(self, test_client, seed_invoice):
        await seed_invoice(invoice_id="x1", customer_id="c1")
        await test_client.post(
            "/dashboard/invoices",
            data={"customerId": "c1", "amount": "45.5", "status": "pending"},
        )

        listing = (await test_client.get("/dashboard/invoices")).json()
        assert listing["total_count"] == 2
        assert {invoice["customer_id"] for invoice in listing["invoices"]} == {"c1"}

        response = await test_client.delete("/dashboard/invoices/x1")
        assert response.json() == {"message": "Deleted Invoice."}
        remaining = (await test_client.get("/dashboard/invoices")).json()["invoices"]
        assert "x1" not in [invoice["id"] for invoice in remaining]
        assert len(remaining) == 1

    @pytest.mark.asyncio
    async def test_get_invoice(self, test_client, seed_invoice, customer_id):
        invoice_id = await seed_invoice(customer_id=customer_id, amount=4550, status="paid")

        response = await test_client.get(f"/dashboard/invoices/{invoice_id}")

        assert response.status_code == 200
        assert response.json() == {
            "id": invoice_id,
            "customer_id": customer_id,
            "amount": 4550,
            "status": "paid",
            "date": "2024-01-15",
        }

    @pytest.mark.asyncio
    async def test_get_unknown_invoice_is_404(self, test_client):
        response = await test_client.get("/dashboard/invoices/x1")

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_list_storage_failure_is_generic_500(self, test_client, mock_db_session):
        mock_db_session.execute = AsyncMock(
            side_effect=OperationalError("SELECT", {}, Exception("relation does not exist"))
        )
        await _use_session(mock_db_session)

        response = await test_client.get("/dashboard/invoices")

        assert response.status_code == 500
        assert response.json()["error"] == "server_error"
        assert "relation" not in response.text


class TestHealthRoute:

    @pytest.mark.asyncio
    async def test_health_reports_database(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"
        assert "X-Request-ID" in response.headers
