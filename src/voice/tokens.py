"""Access tokens for the Twilio Voice JavaScript SDK."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from twilio.jwt.access_token import AccessToken
from twilio.jwt.access_token.grants import VoiceGrant

from config.settings import Settings
from voice.errors import TokenSigningError

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokenIssuer:
    """Signs outgoing-only Voice access tokens for a single TwiML application."""

    account_sid: str
    api_key: str
    api_secret: str = field(repr=False)
    application_sid: str
    identity: str
    ttl: int = 3600

    @classmethod
    def from_settings(cls, settings: Settings) -> TokenIssuer:
        return cls(
            account_sid=settings.twilio_account_id,
            api_key=settings.twilio_api_key,
            api_secret=settings.twilio_api_secret.get_secret_value(),
            application_sid=settings.app_sid,
            identity=settings.caller_identity,
            ttl=settings.token_ttl_seconds,
        )

    def build_grant(self) -> VoiceGrant:
        return VoiceGrant(
            outgoing_application_sid=self.application_sid,
            incoming_allow=False,
        )

    def issue(self) -> str:
        """Return a signed JWT carrying the identity claim and the Voice grant."""

        try:
            token = AccessToken(
                self.account_sid,
                self.api_key,
                self.api_secret,
                identity=self.identity,
                ttl=self.ttl,
            )
            token.add_grant(self.build_grant())
            jwt = token.to_jwt()
        except Exception as exc:
            # Only the type is logged; messages from the JWT layer may echo key material.
            LOGGER.error("Token generation error: %s", type(exc).__name__)
            raise TokenSigningError() from exc

        LOGGER.info("Access token generated for identity=%s", self.identity)
        return jwt
