from __future__ import annotations

import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

REPO_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = REPO_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

REQUIRED_ENV = {
    "TWILIO_ACCOUNT_ID": "AC1",
    "TWILIO_API_KEY": "SK1",
    "TWILIO_API_SECRET": "s3cr3t",
    "APP_SID": "APXXX",
    "SIP_URI": "sip:alice@example.com",
}

OPTIONAL_ENV = (
    "WEBHOOK_PATH",
    "CALLER_IDENTITY",
    "PORT",
    "HOST",
    "LOG_LEVEL",
    "TOKEN_TTL_SECONDS",
    "VOICE_SDK_DIR",
    "REGISTRATION_FALLBACK_MS",
    "PUBLIC_BASE_URL",
)


@pytest.fixture()
def clean_env(monkeypatch: pytest.MonkeyPatch):
    """Environment with none of the service variables set."""

    for name in (*REQUIRED_ENV, *OPTIONAL_ENV):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture()
def make_settings(clean_env, tmp_path: Path):
    from config.settings import Settings

    def _make(**overrides):
        values = {
            "twilio_account_id": "AC1",
            "twilio_api_key": "SK1",
            "twilio_api_secret": "s3cr3t",
            "app_sid": "APXXX",
            "sip_uri": "sip:alice@example.com",
            "voice_sdk_dir": tmp_path / "missing-sdk",
        }
        values.update(overrides)
        return Settings(_env_file=None, **values)

    return _make


@pytest.fixture()
def settings(make_settings):
    return make_settings()


@pytest.fixture()
def app(settings):
    from main import create_app

    return create_app(settings)


@pytest.fixture()
def client(app):
    with TestClient(app) as test_client:
        yield test_client
