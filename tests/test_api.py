from __future__ import annotations

import json
import logging
import re
from datetime import datetime

from fastapi.testclient import TestClient

from main import create_app
from voice.errors import TokenSigningError

PEM_PUBLIC_KEY = "-----BEGIN PUBLIC KEY-----\nMFkwEwYHKoZIzj0CAQYIKoZIzj0DAQcDQgAE\n-----END PUBLIC KEY-----\n"


def test_health_reports_healthy_with_iso_timestamp(client):
    response = client.get("/health")
    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "healthy"
    assert datetime.fromisoformat(payload["timestamp"])


def test_token_endpoint_returns_token(client):
    response = client.get("/token")
    assert response.status_code == 200
    assert response.json()["token"]


def test_token_endpoint_hides_signing_failures(make_settings):
    app = create_app(make_settings(twilio_api_secret=PEM_PUBLIC_KEY))

    with TestClient(app) as client:
        response = client.get("/token")

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to generate token"}
    assert "BEGIN PUBLIC KEY" not in response.text
    assert "Traceback" not in response.text


def test_token_endpoint_maps_issuer_errors(app):
    import api.dependencies as deps

    class BrokenIssuer:
        def issue(self) -> str:
            raise TokenSigningError()

    app.dependency_overrides[deps.get_token_issuer] = lambda: BrokenIssuer()

    with TestClient(app) as client:
        response = client.get("/token")

    app.dependency_overrides.clear()
    assert response.status_code == 500
    assert "error" in response.json()


def test_page_shows_target_and_session_table(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    assert "sip:alice@example.com" in response.text
    assert '<script type="module" src="/static/session.js"></script>' in response.text

    match = re.search(r'<script id="session-table" type="application/json">(.*?)</script>', response.text, re.S)
    assert match
    table = json.loads(match.group(1))
    assert table["initial"] == "uninitialized"
    assert table["registrationFallbackMs"] == 2000
    assert table["transitions"]["session_created"]["registration_timeout"] == "session_ready"


def test_page_escapes_target(make_settings):
    app = create_app(make_settings(sip_uri="sip:<script>@example.com"))

    with TestClient(app) as client:
        response = client.get("/")

    assert "sip:<script>@example.com" not in response.text
    assert "sip:&lt;script&gt;@example.com" in response.text


def test_session_script_is_served(client):
    response = client.get("/static/session.js")
    assert response.status_code == 200
    assert "registration_timeout" in response.text


def test_vendor_sdk_is_served_when_present(make_settings, tmp_path):
    sdk_dir = tmp_path / "voice-sdk"
    (sdk_dir / "dist").mkdir(parents=True)
    (sdk_dir / "dist" / "twilio.min.js").write_text("window.Twilio = {};", encoding="utf-8")

    with TestClient(create_app(make_settings(voice_sdk_dir=sdk_dir))) as client:
        response = client.get("/twilio-sdk/dist/twilio.min.js")

    assert response.status_code == 200
    assert "window.Twilio" in response.text


def test_unknown_route_returns_404(client):
    response = client.get("/unknown/path")
    assert response.status_code == 404
    assert response.json() == {"error": "Not found", "method": "GET", "path": "/unknown/path"}


def test_wrong_method_is_treated_as_unmatched(client):
    response = client.post("/health", data={"foo": "bar"})
    assert response.status_code == 404
    assert response.json()["method"] == "POST"


def test_missing_sdk_file_returns_404(client):
    assert client.get("/twilio-sdk/dist/twilio.min.js").status_code == 404


def test_unknown_route_logs_request_details(client, caplog):
    caplog.set_level(logging.INFO, logger="main")

    response = client.post("/nope", content=b"hello-body", headers={"x-trace-id": "trace-42"})

    assert response.status_code == 404
    records = [record.getMessage() for record in caplog.records if record.name == "main"]
    unhandled = [message for message in records if message.startswith("Unhandled request")]
    assert len(unhandled) == 1
    assert "POST /nope" in unhandled[0]
    assert "trace-42" in unhandled[0]
    assert "hello-body" in unhandled[0]


def test_session_script_tracks_call_progress_on_the_call(client):
    from web.session_machine import Trigger

    script = client.get("/static/session.js").text

    fired = set(re.findall(r"fire\('([a-z_]+)'\)", script))
    assert fired <= {trigger.value for trigger in Trigger}
    assert {"connected", "disconnected"} <= fired
    for event in ("accept", "disconnect", "cancel", "reject"):
        assert f"call.on('{event}'" in script
    assert "bindCall(connection)" in script
