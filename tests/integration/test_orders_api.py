"""
Tests HTTP du cycle de vie des commandes.
"""
import pytest
from decimal import Decimal

API = "/api/v1"


@pytest.fixture
def table(client):
    return client.post(f"{API}/tables", json={"number": 7}).json()


def place_order(client, api_burger, table, quantity=2):
    return client.post(f"{API}/orders", json={
        "items": [{"menu_item_id": api_burger["burger"]["id"], "quantity": quantity}],
        "order_type": "dine-in",
        "table_id": table["id"],
    })


def kitchen_stock(client, ingredient_id):
    return Decimal(client.get(f"{API}/ingredients/{ingredient_id}").json()["kitchen_stock"])


@pytest.mark.integration
class TestOrdersApi:

    def test_create_order(self, client, api_burger, table):
        response = place_order(client, api_burger, table)

        assert response.status_code == 201
        body = response.json()
        order = body["order"]
        assert order["order_number"].startswith("ORD-")
        assert order["status"] == "pending"
        assert Decimal(order["subtotal"]) == Decimal("1600")
        assert Decimal(order["tax"]) == Decimal("256")
        assert Decimal(order["total"]) == Decimal("1856")
        assert order["table_number"] == 7
        assert len(body["movements"]) == 1
        assert body["unresolved"] == []

        assert kitchen_stock(client, api_burger["beef"]["id"]) == Decimal("1.6")
        assert client.get(f"{API}/tables/{table['id']}").json()["status"] == "occupied"
        assert client.get(f"{API}/tables/{table['id']}/order").json()["id"] == order["id"]

    def test_empty_cart_is_422(self, client):
        response = client.post(f"{API}/orders", json={"items": []})

        assert response.status_code == 422
        assert response.json()["error"] == "EMPTY_CART"

    def test_occupied_table_is_409(self, client, api_burger, table):
        place_order(client, api_burger, table)

        response = place_order(client, api_burger, table, quantity=1)

        assert response.status_code == 409
        assert response.json()["error"] == "TABLE_OCCUPIED"
        assert kitchen_stock(client, api_burger["beef"]["id"]) == Decimal("1.6")

    def test_settle_frees_table(self, client, api_burger, table):
        order_id = place_order(client, api_burger, table).json()["order"]["id"]

        settled = client.post(f"{API}/orders/{order_id}/settle")

        assert settled.status_code == 200
        assert settled.json()["status"] == "completed"
        assert settled.json()["completed_at"] is not None
        assert client.get(f"{API}/tables/{table['id']}").json()["status"] == "available"

        again = client.post(f"{API}/orders/{order_id}/settle")
        assert again.status_code == 409
        assert again.json()["error"] == "INVALID_ORDER_TRANSITION"

    def test_cancel_restores_stock(self, client, api_burger, table):
        order_id = place_order(client, api_burger, table).json()["order"]["id"]

        cancelled = client.post(f"{API}/orders/{order_id}/cancel")

        assert cancelled.status_code == 200
        body = cancelled.json()
        assert body["order"]["status"] == "cancelled"
        assert body["is_partial"] is False
        assert kitchen_stock(client, api_burger["beef"]["id"]) == Decimal("2")
        assert client.get(f"{API}/tables/{table['id']}").json()["current_order_id"] is None

    def test_update_pending_order(self, client, api_burger, table):
        order_id = place_order(client, api_burger, table).json()["order"]["id"]

        response = client.put(f"{API}/orders/{order_id}", json={
            "items": [{"menu_item_id": api_burger["burger"]["id"], "quantity": 3}],
            "order_type": "dine-in",
            "table_id": table["id"],
            "discount_type": "percentage",
            "discount_value": "10",
        })

        assert response.status_code == 200
        order = response.json()
        assert Decimal(order["subtotal"]) == Decimal("2400")
        assert Decimal(order["discount"]) == Decimal("240")
        assert Decimal(order["total"]) == Decimal("2544")

    def test_pending_and_listing(self, client, api_burger, table):
        order_id = place_order(client, api_burger, table).json()["order"]["id"]

        pending = client.get(f"{API}/orders/pending").json()
        assert [o["id"] for o in pending] == [order_id]

        filtered = client.get(f"{API}/orders", params={"status": "completed"}).json()
        assert filtered == []

    def test_daily_report_counts_settled_order(self, client, api_burger, table):
        order_id = place_order(client, api_burger, table).json()["order"]["id"]
        client.post(f"{API}/orders/{order_id}/settle")

        report = client.get(f"{API}/reports/daily").json()

        assert report["completed_orders"] == 1
        assert Decimal(report["revenue"]) == Decimal("1856")
        assert Decimal(report["cost"]) == Decimal("400")

    def test_sales_summary_length(self, client):
        response = client.get(f"{API}/reports/sales", params={"days": 3})

        assert response.status_code == 200
        assert len(response.json()) == 3
