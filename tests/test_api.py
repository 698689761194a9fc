"""End-to-end tests through the HTTP API."""

import json
from datetime import timedelta

import pytest

from conftest import TENANT_A, seed_tenant
from food_finance_api.security.auth import create_access_token


async def test_health(client) -> None:
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}
    assert response.headers["X-Content-Type-Options"] == "nosniff"


class TestAuthentication:
    """Every data endpoint requires a session."""

    @pytest.mark.parametrize(
        "method,path",
        [
            ("get", "/api/v1/suppliers"),
            ("get", "/api/v1/dashboard"),
            ("get", "/api/v1/backup/summary"),
            ("post", "/api/v1/backup/export"),
        ],
    )
    async def test_missing_token(self, client, method: str, path: str) -> None:
        """Requests without a bearer token are denied before any work."""
        response = await getattr(client, method)(path)

        assert response.status_code == 401
        assert response.json()["detail"] == "Authentication required"

    async def test_expired_token(self, client) -> None:
        """Expired sessions are rejected."""
        token = create_access_token(TENANT_A, expires_delta=timedelta(seconds=-5))

        response = await client.get("/api/v1/suppliers", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid or expired token"

    async def test_garbage_token(self, client) -> None:
        response = await client.get("/api/v1/suppliers", headers={"Authorization": "Bearer not-a-jwt"})

        assert response.status_code == 401


class TestEntityEndpoints:
    """Test CRUD endpoints and their error mapping."""

    async def test_supplier_crud(self, client, headers_a) -> None:
        """Suppliers can be created, listed, updated and deleted."""
        created = await client.post("/api/v1/suppliers", json={"name": "Feira"}, headers=headers_a)
        assert created.status_code == 201
        supplier_id = created.json()["id"]

        updated = await client.put(
            f"/api/v1/suppliers/{supplier_id}",
            json={"name": "Feira Livre", "email": "feira@example.com"},
            headers=headers_a,
        )
        assert updated.status_code == 200
        assert updated.json()["name"] == "Feira Livre"

        listed = await client.get("/api/v1/suppliers", headers=headers_a)
        assert listed.json()["total"] == 1

        deleted = await client.delete(f"/api/v1/suppliers/{supplier_id}", headers=headers_a)
        assert deleted.status_code == 204

    async def test_other_tenant_sees_404(self, client, headers_a, headers_b) -> None:
        """A record of another tenant is reported as missing."""
        created = await client.post("/api/v1/suppliers", json={"name": "Feira"}, headers=headers_a)

        response = await client.get(f"/api/v1/suppliers/{created.json()['id']}", headers=headers_b)

        assert response.status_code == 404
        assert response.json()["detail"] == "Supplier not found"

    async def test_duplicate_stock_name_is_conflict(self, client, headers_a) -> None:
        """Duplicate stock names return 409 with a field error."""
        body = {"name": "Farinha", "unit": "kg", "quantity": "2", "unit_cost": "3.50"}
        first = await client.post("/api/v1/stock-items", json=body, headers=headers_a)
        assert first.status_code == 201
        assert first.json()["total_value"] == "7.00"

        second = await client.post("/api/v1/stock-items", json=body, headers=headers_a)

        assert second.status_code == 409
        assert "name" in second.json()["field_errors"]

    async def test_category_in_use_reports_count(self, client, headers_a) -> None:
        """Deleting a category in use returns 409 with the number of expenses."""
        category = (
            await client.post("/api/v1/expense-categories", json={"name": "Energia"}, headers=headers_a)
        ).json()
        for value in ("10.00", "20.00", "30.00"):
            response = await client.post(
                "/api/v1/expenses",
                json={
                    "category_id": category["id"],
                    "value": value,
                    "date": "2026-03-01T10:00:00Z",
                    "payment_method": "pix",
                },
                headers=headers_a,
            )
            assert response.status_code == 201

        response = await client.delete(f"/api/v1/expense-categories/{category['id']}", headers=headers_a)

        assert response.status_code == 409
        assert response.json()["count"] == 3
        assert "3 associated expenses" in response.json()["detail"]

    async def test_request_validation_lists_fields(self, client, headers_a) -> None:
        """Invalid bodies return 422 with per-field errors."""
        response = await client.post(
            "/api/v1/sales",
            json={"date": "2026-03-01T10:00:00Z", "total_value": "-1", "payment_method": "cash"},
            headers=headers_a,
        )

        assert response.status_code == 422
        assert "total_value" in response.json()["field_errors"]

    async def test_store_is_null_until_saved(self, client, headers_a) -> None:
        assert (await client.get("/api/v1/store", headers=headers_a)).json() is None

        saved = await client.put("/api/v1/store", json={"name": "Cantina"}, headers=headers_a)

        assert saved.status_code == 200
        assert (await client.get("/api/v1/store", headers=headers_a)).json()["name"] == "Cantina"

    async def test_invalid_report_month(self, client, headers_a) -> None:
        response = await client.get("/api/v1/reports/monthly?year=2026&month=13", headers=headers_a)

        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid month"


class TestBackupEndpoints:
    """Test backup export and import over HTTP."""

    async def test_export_is_attachment(self, client, session, headers_a) -> None:
        """Export downloads a dated JSON file."""
        await seed_tenant(session, TENANT_A)

        response = await client.post("/api/v1/backup/export", headers=headers_a)

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/json")
        disposition = response.headers["content-disposition"]
        assert disposition.startswith('attachment; filename="food-finance-backup-')
        assert response.json()["userId"] == TENANT_A

    async def test_export_then_import(self, client, session, cache, headers_a) -> None:
        """An exported file restores cleanly and invalidates the tenant's caches."""
        await seed_tenant(session, TENANT_A)
        exported = (await client.post("/api/v1/backup/export", headers=headers_a)).content

        response = await client.post(
            "/api/v1/backup/import",
            files={"file": ("backup.json", exported, "application/json")},
            headers=headers_a,
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["imported"]["purchases"] == 1
        assert "backup-summary" in cache.invalidated_tags(TENANT_A)

    async def test_import_rejects_malformed_file(self, client, headers_a) -> None:
        response = await client.post(
            "/api/v1/backup/import",
            files={"file": ("backup.json", b"{oops", "application/json")},
            headers=headers_a,
        )

        assert response.status_code == 400
        assert response.json()["error_kind"] == "malformed_json"

    async def test_import_rejects_empty_file(self, client, headers_a) -> None:
        response = await client.post(
            "/api/v1/backup/import",
            files={"file": ("backup.json", b"", "application/json")},
            headers=headers_a,
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Backup file is empty"

    async def test_import_failure_is_server_error(self, client, session, headers_a) -> None:
        """A rolled back restore returns 500 and keeps the existing data."""
        await seed_tenant(session, TENANT_A)
        raw = json.dumps(
            {
                "version": "1.0.0",
                "data": {
                    "expenses": [
                        {
                            "categoryId": "7d4f3c52-0a43-4c5e-9a2c-4b2f4f7f7a10",
                            "value": "10.00",
                            "date": "2026-03-01T00:00:00Z",
                            "paymentMethod": "cash",
                        }
                    ]
                },
            }
        )

        response = await client.post(
            "/api/v1/backup/import",
            files={"file": ("backup.json", raw.encode(), "application/json")},
            headers=headers_a,
        )

        assert response.status_code == 500
        assert response.json()["error_kind"] == "transaction_failed"
        summary = (await client.get("/api/v1/backup/summary", headers=headers_a)).json()
        assert summary["expenses"] == 1

    async def test_validate_endpoint(self, client, headers_a) -> None:
        raw = json.dumps({"version": "1.0.0", "data": {"sales": []}}).encode()

        response = await client.post(
            "/api/v1/backup/validate",
            files={"file": ("backup.json", raw, "application/json")},
            headers=headers_a,
        )

        assert response.status_code == 200
        assert response.json()["valid"] is True

    async def test_summary_is_per_tenant(self, client, session, headers_b) -> None:
        await seed_tenant(session, TENANT_A)

        response = await client.get("/api/v1/backup/summary", headers=headers_b)

        assert response.json()["suppliers"] == 0
