"""Browser-facing routes: calling page, access token and health."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse

from api.dependencies import get_settings, get_token_issuer
from api.schemas import ErrorResponse, HealthResponse, TokenResponse
from config.settings import Settings
from voice.tokens import TokenIssuer
from web.page import render_page

LOGGER = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_class=HTMLResponse)
async def calling_page(settings: Settings = Depends(get_settings)) -> HTMLResponse:
    return HTMLResponse(
        render_page(
            sip_uri=settings.sip_uri,
            registration_fallback_ms=settings.registration_fallback_ms,
        )
    )


@router.get(
    "/token",
    response_model=TokenResponse,
    responses={500: {"model": ErrorResponse}},
)
def issue_token(issuer: TokenIssuer = Depends(get_token_issuer)) -> TokenResponse:
    # TokenSigningError is rendered by the application's DialerError handler.
    return TokenResponse(token=issuer.issue())


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse()
