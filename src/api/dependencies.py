"""Shared FastAPI dependencies.

The application factory stores the settings and the token issuer on ``app.state``;
handlers receive them from here so tests can substitute either one.
"""

from __future__ import annotations

from fastapi import Request

from config.settings import Settings
from voice.tokens import TokenIssuer


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_token_issuer(request: Request) -> TokenIssuer:
    return request.app.state.token_issuer
