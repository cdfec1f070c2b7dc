import pytest

from liirat_api.main import app
from liirat_api.schemas.quote import Quote


def _alert_body(**overrides):
    body = {
        "symbol": "AAPL",
        "type": "price",
        "condition": "above",
        "targetValue": "200",
        "notificationMethod": "email",
        "contactInfo": "trader@example.com",
    }
    body.update(overrides)
    return body


def test_create_and_list(client):
    response = client.post("/api/alerts", json=_alert_body())

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    alert = body["alert"]
    assert alert["id"] == 1
    assert alert["targetValue"] == 200.0
    assert alert["isActive"] is True
    assert alert["triggeredAt"] is None
    assert alert["createdAt"].endswith("Z")

    listed = client.get("/api/alerts").json()
    assert listed["total"] == 1
    assert listed["alerts"][0]["symbol"] == "AAPL"


def test_ids_are_monotonic(client):
    first = client.post("/api/alerts", json=_alert_body()).json()["alert"]["id"]
    client.delete(f"/api/alerts?id={first}")
    second = client.post("/api/alerts", json=_alert_body()).json()["alert"]["id"]

    assert second == first + 1


def test_missing_contact_info(client):
    body = _alert_body()
    del body["contactInfo"]

    response = client.post("/api/alerts", json=body)

    assert response.status_code == 400
    assert response.json()["error"].startswith("Missing required fields: ")


def test_missing_body(client):
    response = client.post("/api/alerts")

    assert response.status_code == 400
    assert response.json()["error"].startswith("Missing required fields")


@pytest.mark.parametrize(
    "overrides,message",
    [
        ({"type": "volume"}, "Invalid alert type"),
        ({"notificationMethod": "fax"}, "Invalid notification method"),
        ({"contactInfo": "not-an-email"}, "Invalid email address"),
        ({"notificationMethod": "sms", "contactInfo": "12"}, "Invalid phone number"),
    ],
)
def test_invalid_fields(client, overrides, message):
    response = client.post("/api/alerts", json=_alert_body(**overrides))

    assert response.status_code == 400
    assert response.json()["error"] == message


def test_update_merges_fields(client):
    alert_id = client.post("/api/alerts", json=_alert_body()).json()["alert"]["id"]

    response = client.put(
        f"/api/alerts?id={alert_id}",
        json={"targetValue": 250, "id": 99, "createdAt": "yesterday"},
    )

    assert response.status_code == 200
    alert = response.json()["alert"]
    assert alert["id"] == alert_id
    assert alert["targetValue"] == 250.0
    assert alert["createdAt"] != "yesterday"
    assert alert["isActive"] is True
    assert alert["contactInfo"] == "trader@example.com"


def test_update_method_checked_against_stored_contact(client):
    alert_id = client.post("/api/alerts", json=_alert_body()).json()["alert"]["id"]

    response = client.put(f"/api/alerts?id={alert_id}", json={"notificationMethod": "email"})

    assert response.status_code == 200
    assert response.json()["alert"]["contactInfo"] == "trader@example.com"


def test_update_rejects_contact_invalid_for_stored_method(client):
    alert_id = client.post("/api/alerts", json=_alert_body()).json()["alert"]["id"]

    response = client.put(f"/api/alerts?id={alert_id}", json={"contactInfo": "bad"})

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid email address"
    [alert] = client.get("/api/alerts").json()["alerts"]
    assert alert["contactInfo"] == "trader@example.com"


def test_zero_target_is_kept(client):
    response = client.post("/api/alerts", json=_alert_body(condition="below", targetValue=0))

    assert response.status_code == 201
    assert response.json()["alert"]["targetValue"] == 0.0


@pytest.mark.parametrize("target", ["abc", "NA"])
def test_non_numeric_target_rejected(client, target):
    response = client.post("/api/alerts", json=_alert_body(targetValue=target))

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid target value"
    assert client.get("/api/alerts").json()["total"] == 0


def test_update_rejects_non_numeric_target(client):
    alert_id = client.post("/api/alerts", json=_alert_body()).json()["alert"]["id"]

    response = client.put(f"/api/alerts?id={alert_id}", json={"targetValue": "soon"})

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid target value"


def test_update_can_deactivate(client):
    alert_id = client.post("/api/alerts", json=_alert_body()).json()["alert"]["id"]

    client.put(f"/api/alerts?id={alert_id}", json={"isActive": False})

    assert client.get("/api/alerts").json()["total"] == 0


def test_update_unknown_id(client):
    response = client.put("/api/alerts?id=5", json={"targetValue": 1})

    assert response.status_code == 404
    assert response.json()["error"] == "Alert not found"


def test_delete(client):
    alert_id = client.post("/api/alerts", json=_alert_body()).json()["alert"]["id"]

    assert client.delete(f"/api/alerts?id={alert_id}").status_code == 200
    assert client.delete(f"/api/alerts?id={alert_id}").status_code == 404
    assert client.delete("/api/alerts?id=abc").status_code == 404


def test_disallowed_verb(client):
    response = client.patch("/api/alerts", json={})

    assert response.status_code == 405
    assert response.json() == {"error": "Method not allowed"}


def test_quote_update_triggers_price_alert(client):
    client.post("/api/alerts", json=_alert_body(targetValue="200"))
    client.post("/api/alerts", json=_alert_body(condition="below", targetValue="100"))
    client.post("/api/alerts", json=_alert_body(type="news", contactInfo="a@b.co"))

    cache = app.container.repositories.quote_cache()
    cache.publish(Quote(symbol="AAPL.US", price=201.5))

    store = app.container.repositories.alert_store()
    triggered = [alert for alert in store.list_all() if alert.triggeredAt]
    assert [alert.id for alert in triggered] == [1]
    assert triggered[0].isActive is False
    assert client.get("/api/alerts").json()["total"] == 2
