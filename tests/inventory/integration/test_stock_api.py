"""Integration tests for the stock record API via TestClient."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from inventory.api.routes import stock_router
from inventory.stock.record import StockRecord
from notifications.alert.dispatch import AlertDispatcher, DispatcherConfig
from notifications.channel import FakeAlertChannel
from protean import current_domain
from protean.integrations.fastapi import register_exception_handlers


@pytest.fixture()
def channels():
    return {
        "email": FakeAlertChannel(message_style="email", name="email"),
        "relay": FakeAlertChannel(message_style="text", name="relay"),
    }


@pytest.fixture()
def dispatcher(channels):
    dispatcher = AlertDispatcher(DispatcherConfig(channels=channels))
    yield dispatcher
    dispatcher.shutdown()


@pytest.fixture()
def client(dispatcher):
    app = FastAPI()
    app.include_router(stock_router)
    register_exception_handlers(app)
    app.state.alert_dispatcher = dispatcher
    return TestClient(app)


def _create(client, **overrides):
    """Helper: POST /stock-records and return the record id."""
    defaults = {"name": "Paracetamol 500mg", "quantity": 10, "threshold": 5}
    defaults.update(overrides)
    response = client.post("/stock-records", json=defaults)
    assert response.status_code == 201
    return response.json()["id"]


class TestCreateEndpoint:
    def test_create_record(self, client):
        record_id = _create(client)
        record = current_domain.repository_for(StockRecord).get(record_id)
        assert record.name == "Paracetamol 500mg"
        assert record.quantity == 10

    def test_response_format(self, client):
        response = client.post("/stock-records", json={"name": "Insulin", "quantity": 4, "threshold": 2})
        data = response.json()
        assert data["name"] == "Insulin"
        assert data["quantity"] == 4
        assert data["threshold"] == 2
        assert data["history"] == []

    def test_empty_name_rejected(self, client):
        response = client.post("/stock-records", json={"name": "", "quantity": 4, "threshold": 2})
        assert response.status_code == 422


class TestReadEndpoints:
    def test_list_records(self, client):
        _create(client, name="Insulin")
        _create(client, name="Aspirin")
        response = client.get("/stock-records")
        assert response.status_code == 200
        assert sorted(r["name"] for r in response.json()) == ["Aspirin", "Insulin"]

    def test_get_record(self, client):
        record_id = _create(client)
        response = client.get(f"/stock-records/{record_id}")
        assert response.status_code == 200
        assert response.json()["id"] == record_id

    def test_get_unknown_record(self, client):
        response = client.get("/stock-records/does-not-exist")
        assert response.status_code == 404


class TestTransactionEndpoint:
    def test_consumption_below_threshold_alerts(self, client, channels, dispatcher):
        record_id = _create(client, quantity=10, threshold=5)
        response = client.put(f"/stock-records/{record_id}", json={"amount_consumed": 7})

        assert response.status_code == 200
        data = response.json()
        assert data["quantity"] == 3
        assert data["crossed_below_threshold"] is True
        assert data["history"][0]["amount_consumed"] == 7

        dispatcher.shutdown(wait=True)
        assert len(channels["email"].sent_messages) == 1
        assert len(channels["relay"].sent_messages) == 1
        assert channels["email"].sent_messages[0]["subject"] == "Low Stock Alert: Paracetamol 500mg"

    def test_restock_does_not_alert(self, client, channels):
        record_id = _create(client, quantity=10, threshold=5)
        response = client.put(f"/stock-records/{record_id}", json={"amount_restocked": 2})

        data = response.json()
        assert data["quantity"] == 12
        assert data["crossed_below_threshold"] is False
        assert channels["email"].attempts == 0
        assert channels["relay"].attempts == 0

    def test_combined_update(self, client):
        record_id = _create(client, quantity=20, threshold=5)
        response = client.put(
            f"/stock-records/{record_id}",
            json={"amount_consumed": 5, "amount_restocked": 3},
        )
        data = response.json()
        assert data["quantity"] == 18
        assert [(h["amount_consumed"], h["amount_restocked"]) for h in data["history"]] == [(5, 0), (0, 3)]

    def test_string_amount_accepted(self, client):
        record_id = _create(client, quantity=10, threshold=0)
        response = client.put(f"/stock-records/{record_id}", json={"amount_consumed": "4"})
        assert response.status_code == 200
        assert response.json()["quantity"] == 6

    def test_integral_float_amount_accepted(self, client):
        record_id = _create(client, quantity=10, threshold=0)
        response = client.put(f"/stock-records/{record_id}", json={"amount_consumed": 5.0})
        assert response.status_code == 200
        assert response.json()["quantity"] == 5

    def test_fractional_amount_rejected(self, client):
        record_id = _create(client)
        response = client.put(f"/stock-records/{record_id}", json={"amount_consumed": 2.5})
        assert response.status_code == 400

    def test_negative_amount_rejected(self, client):
        record_id = _create(client)
        response = client.put(f"/stock-records/{record_id}", json={"amount_consumed": -3})
        assert response.status_code == 400

    def test_unknown_record(self, client):
        response = client.put("/stock-records/does-not-exist", json={"amount_consumed": 1})
        assert response.status_code == 404

    def test_failing_channel_still_succeeds(self, client, channels):
        channels["email"].configure(should_succeed=False, raise_on_failure=True)
        record_id = _create(client, quantity=10, threshold=5)

        response = client.put(f"/stock-records/{record_id}", json={"amount_consumed": 7})

        assert response.status_code == 200
        assert response.json()["quantity"] == 3


class TestDeleteEndpoint:
    def test_delete_record(self, client):
        record_id = _create(client)
        response = client.delete(f"/stock-records/{record_id}")
        assert response.status_code == 200
        assert response.json() == {"message": "Stock record deleted"}

        assert client.get(f"/stock-records/{record_id}").status_code == 404

    def test_delete_unknown_record(self, client):
        response = client.delete("/stock-records/does-not-exist")
        assert response.status_code == 404
