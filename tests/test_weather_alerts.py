from datetime import datetime, timedelta, timezone

import pytest
import requests
from twilio.base.exceptions import TwilioException

from relief_dashboard import config
from relief_dashboard.endpoints import weather_alerts
from relief_dashboard.utils import alerts


@pytest.fixture
def sent(monkeypatch):
    messages = []

    def fake_send(phone, message):
        messages.append((phone, message))
        return True

    monkeypatch.setattr(weather_alerts, "send_sms", fake_send)
    return messages


def alert_body(**overrides):
    body = {
        "type": "flood_warning",
        "severity": "medium",
        "title": "Pamba river rising",
        "message": "Water level expected to cross danger mark by evening.",
        "affected_area": "Kuttanad",
    }
    body.update(overrides)
    return body


def iso(dt):
    return dt.isoformat()


def test_create_alert(client, auth_headers, current_user_id, sent):
    r = client.post("/api/weather-alerts", headers=auth_headers, json=alert_body())
    assert r.status_code == 200
    a = r.json()
    assert a["is_active"] is True
    assert a["created_by"] == current_user_id

    act = client.get("/api/activities", headers=auth_headers).json()[0]
    assert act["type"] == "alert_creation"
    assert act["description"] == "Created medium alert: Pamba river rising"
    assert act["location"] == "Kuttanad"
    assert sent == []


def test_alert_validation(client, auth_headers):
    assert client.post("/api/weather-alerts", headers=auth_headers,
                       json=alert_body(type="earthquake")).status_code == 422
    assert client.post("/api/weather-alerts", headers=auth_headers,
                       json=alert_body(severity="critical")).status_code == 422


def test_active_alerts_exclude_expired_and_inactive(client, auth_headers, sent):
    now = datetime.now(timezone.utc)
    future = client.post("/api/weather-alerts", headers=auth_headers,
                         json=alert_body(title="Future", valid_until=iso(now + timedelta(hours=6)))).json()
    client.post("/api/weather-alerts", headers=auth_headers,
                json=alert_body(title="Expired", valid_until=iso(now - timedelta(hours=1))))
    open_ended = client.post("/api/weather-alerts", headers=auth_headers, json=alert_body(title="Open")).json()
    client.post("/api/weather-alerts", headers=auth_headers, json=alert_body(title="Draft", is_active=False))

    titles = [a["title"] for a in client.get("/api/weather-alerts", headers=auth_headers).json()]
    assert titles == ["Open", "Future"]

    r = client.delete(f"/api/weather-alerts/{future['id']}", headers=auth_headers)
    assert r.status_code == 200
    assert r.json() == {"success": True}
    active = client.get("/api/weather-alerts", headers=auth_headers).json()
    assert [a["id"] for a in active] == [open_ended["id"]]


def test_deactivation_logged(client, auth_headers, sent):
    a = client.post("/api/weather-alerts", headers=auth_headers, json=alert_body()).json()
    client.delete(f"/api/weather-alerts/{a['id']}", headers=auth_headers)
    act = client.get("/api/activities", headers=auth_headers).json()[0]
    assert act["type"] == "alert_deactivation"
    assert act["entity_id"] == a["id"]


def test_deactivate_unknown_alert(client, auth_headers):
    r = client.delete("/api/weather-alerts/nope", headers=auth_headers)
    assert r.status_code == 404


def test_high_alert_texts_active_teams(client, auth_headers, sent):
    client.post("/api/response-teams", headers=auth_headers, json={
        "name": "Alpha", "type": "evacuation", "status": "active", "contact_number": "+919800000001",
    })
    client.post("/api/response-teams", headers=auth_headers, json={
        "name": "Bravo", "type": "standby", "status": "standby", "contact_number": "+919800000002",
    })
    client.post("/api/response-teams", headers=auth_headers, json={
        "name": "Charlie", "type": "medical_response", "status": "active",
    })

    r = client.post("/api/weather-alerts", headers=auth_headers,
                    json=alert_body(severity="high", type="dam_release", title="Idukki shutters open"))
    assert r.status_code == 200
    assert len(sent) == 1
    phone, message = sent[0]
    assert phone == "+919800000001"
    assert "Idukki shutters open" in message
    assert "HIGH" in message


@pytest.mark.parametrize("error", [
    TwilioException("unverified number"),
    requests.exceptions.ConnectionError("connection refused"),
])
def test_alert_saved_once_when_sms_fails(client, auth_headers, monkeypatch, error):
    monkeypatch.setattr(config, "TWILIO_SID", "AC123")
    monkeypatch.setattr(config, "TWILIO_AUTH", "token")
    monkeypatch.setattr(config, "TWILIO_PHONE", "+15550001111")

    class FakeClient:
        def __init__(self, sid, auth):
            self.messages = self

        def create(self, **kwargs):
            raise error

    monkeypatch.setattr(alerts, "Client", FakeClient)
    client.post("/api/response-teams", headers=auth_headers, json={
        "name": "Alpha", "type": "evacuation", "status": "active", "contact_number": "+919800000001",
    })

    r = client.post("/api/weather-alerts", headers=auth_headers, json=alert_body(severity="high"))
    assert r.status_code == 200
    assert r.json()["title"] == "Pamba river rising"

    acts = client.get("/api/activities", headers=auth_headers).json()
    assert [a["type"] for a in acts].count("alert_creation") == 1
    assert len(client.get("/api/weather-alerts", headers=auth_headers).json()) == 1


def test_broadcast_error_does_not_fail_alert(client, auth_headers, monkeypatch):
    def broken_send(phone, message):
        raise RuntimeError("gateway down")

    monkeypatch.setattr(weather_alerts, "send_sms", broken_send)
    client.post("/api/response-teams", headers=auth_headers, json={
        "name": "Alpha", "type": "evacuation", "status": "active", "contact_number": "+919800000001",
    })

    r = client.post("/api/weather-alerts", headers=auth_headers, json=alert_body(severity="high"))
    assert r.status_code == 200
    assert r.json()["is_active"] is True
