"""Twilio Voice webhooks.

This module provides:
- Voice webhook (TwiML) dialing the configured SIP URI for browser-originated calls.
- Status callback sink acknowledging call progress notifications.

Both are mounted under ``/webhooks/<WEBHOOK_PATH>``, so the router is built per application.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import PlainTextResponse
from starlette.datastructures import FormData
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.formparsers import MultiPartException

from api.dependencies import get_settings
from config.settings import Settings
from voice.twiml import dial_sip, twiml_response

LOGGER = logging.getLogger(__name__)


async def _read_form(request: Request) -> FormData:
    """Parsed form body, or an empty form when the body cannot be parsed."""

    try:
        return await request.form()
    except (StarletteHTTPException, MultiPartException) as exc:
        LOGGER.warning(
            "Ignoring unparsable body on %s: %s",
            request.url.path,
            getattr(exc, "detail", None) or exc,
        )
        return FormData()


def _form_value(form, key: str) -> str | None:
    value = str(form.get(key) or "").strip()
    return value or None


def build_router(webhook_path: str) -> APIRouter:
    router = APIRouter(prefix=f"/webhooks/{webhook_path.strip('/')}", tags=["twilio"])

    @router.post("")
    async def twilio_voice_webhook(
        request: Request,
        settings: Settings = Depends(get_settings),
    ) -> Response:
        form = await _read_form(request)
        LOGGER.info("Voice webhook called call_sid=%s", _form_value(form, "CallSid") or "unknown")

        return twiml_response(dial_sip(sip_uri=settings.sip_uri, caller_id=settings.caller_identity))

    @router.post("/status")
    async def twilio_status_callback(request: Request) -> PlainTextResponse:
        form = await _read_form(request)
        status = _form_value(form, "CallStatus")
        if status:
            LOGGER.info("Call status update: %s (call_sid=%s)", status, _form_value(form, "CallSid") or "unknown")
        else:
            LOGGER.info("Call status update without CallStatus")

        return PlainTextResponse("OK", status_code=200)

    return router
