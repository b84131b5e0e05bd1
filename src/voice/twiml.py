from __future__ import annotations

from fastapi import Response
from twilio.twiml.voice_response import VoiceResponse


def dial_sip(*, sip_uri: str, caller_id: str) -> str:
    """TwiML that bridges the call to ``sip_uri`` presenting ``caller_id``."""

    response = VoiceResponse()
    dial = response.dial(caller_id=caller_id)
    dial.sip(sip_uri)
    return str(response)


def twiml_response(xml: str) -> Response:
    # TwiML is served as XML; Twilio treats application/xml and text/xml alike.
    return Response(content=xml, media_type="application/xml")
