"""
Tests HTTP des depenses journalieres.
"""
import pytest
from decimal import Decimal

API = "/api/v1"
DAY = "2024-03-10"


@pytest.mark.integration
class TestExpensesApi:

    def test_crud(self, client):
        created = client.post(f"{API}/expenses", json={
            "category": "wages", "amount": "1500", "expense_date": DAY, "description": "Cuisinier",
        })
        assert created.status_code == 201
        expense = created.json()
        assert expense["category"] == "wages"
        assert Decimal(expense["amount"]) == Decimal("1500")

        patched = client.patch(f"{API}/expenses/{expense['id']}", json={"amount": "1200", "description": None})
        assert Decimal(patched.json()["amount"]) == Decimal("1200")
        assert patched.json()["description"] is None

        listed = client.get(f"{API}/expenses", params={"expense_date": DAY}).json()
        assert [e["id"] for e in listed] == [expense["id"]]

        assert client.delete(f"{API}/expenses/{expense['id']}").status_code == 204
        missing = client.get(f"{API}/expenses/{expense['id']}")
        assert missing.status_code == 404
        assert missing.json()["error"] == "EXPENSE_NOT_FOUND"

    @pytest.mark.parametrize("payload", [
        {"category": "wages", "amount": "0"},
        {"category": "wages", "amount": "-5"},
        {"category": "taxes", "amount": "10"},
        {"category": "wages"},
    ])
    def test_invalid_expense_is_422(self, client, payload):
        assert client.post(f"{API}/expenses", json=payload).status_code == 422

    def test_day_total(self, client):
        client.post(f"{API}/expenses", json={"category": "rent", "amount": "800", "expense_date": DAY})
        client.post(f"{API}/expenses", json={"category": "utilities", "amount": "45.50", "expense_date": DAY})

        total = client.get(f"{API}/expenses/total", params={"expense_date": DAY}).json()

        assert total["count"] == 2
        assert Decimal(total["total"]) == Decimal("845.50")

    def test_daily_report_net_profit(self, client):
        client.post(f"{API}/expenses", json={"category": "transport", "amount": "60", "expense_date": DAY})

        report = client.get(f"{API}/reports/daily", params={"business_date": DAY}).json()

        assert Decimal(report["expenses"]) == Decimal("60")
        assert Decimal(report["net_profit"]) == Decimal("-60")
        assert Decimal(report["expense_breakdown"]["transport"]) == Decimal("60")
