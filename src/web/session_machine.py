"""Browser call-session states and the transitions between them.

The table is the single source of truth for the page: it is serialized into the
rendered HTML and interpreted by ``static/session.js``. Device events and button
clicks are mapped onto triggers; a (state, trigger) pair missing from the table
leaves the state unchanged.

``REGISTRATION_TIMEOUT`` is fired by the page after a fixed delay. Outbound calls
do not need a registered device and the SDK does not always deliver ``ready``, so
the timeout moves the session to ``SESSION_READY`` on its own.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class SessionState(str, Enum):
    UNINITIALIZED = "uninitialized"
    TOKEN_REQUESTED = "token_requested"
    SESSION_CREATED = "session_created"
    SESSION_READY = "session_ready"
    REGISTRATION_FAILED = "registration_failed"
    CONNECTING = "connecting"
    CALL_ACTIVE = "call_active"
    CALL_ENDED = "call_ended"


class Trigger(str, Enum):
    INITIALIZE = "initialize"
    TOKEN_RECEIVED = "token_received"
    TOKEN_FAILED = "token_failed"
    READY = "ready"
    REGISTERED = "registered"
    UNREGISTERED = "unregistered"
    ERROR = "error"
    REGISTRATION_TIMEOUT = "registration_timeout"
    DIAL = "dial"
    CONNECTED = "connected"
    CALL_FAILED = "call_failed"
    DISCONNECTED = "disconnected"


S = SessionState
T = Trigger

TRANSITIONS: dict[tuple[SessionState, Trigger], SessionState] = {
    (S.UNINITIALIZED, T.INITIALIZE): S.TOKEN_REQUESTED,
    (S.TOKEN_REQUESTED, T.TOKEN_RECEIVED): S.SESSION_CREATED,
    (S.TOKEN_REQUESTED, T.TOKEN_FAILED): S.UNINITIALIZED,
    (S.SESSION_CREATED, T.READY): S.SESSION_READY,
    (S.SESSION_CREATED, T.REGISTERED): S.SESSION_READY,
    (S.SESSION_CREATED, T.UNREGISTERED): S.REGISTRATION_FAILED,
    (S.SESSION_CREATED, T.ERROR): S.REGISTRATION_FAILED,
    (S.SESSION_CREATED, T.REGISTRATION_TIMEOUT): S.SESSION_READY,
    (S.REGISTRATION_FAILED, T.READY): S.SESSION_READY,
    (S.REGISTRATION_FAILED, T.REGISTERED): S.SESSION_READY,
    (S.REGISTRATION_FAILED, T.REGISTRATION_TIMEOUT): S.SESSION_READY,
    (S.SESSION_READY, T.DIAL): S.CONNECTING,
    (S.CALL_ENDED, T.DIAL): S.CONNECTING,
    (S.CONNECTING, T.CONNECTED): S.CALL_ACTIVE,
    (S.CONNECTING, T.CALL_FAILED): S.SESSION_READY,
    (S.CONNECTING, T.DISCONNECTED): S.CALL_ENDED,
    (S.CALL_ACTIVE, T.DISCONNECTED): S.CALL_ENDED,
}

CALL_ENABLED_STATES = frozenset({S.SESSION_READY, S.CALL_ENDED})
HANGUP_ENABLED_STATES = frozenset({S.CONNECTING, S.CALL_ACTIVE})

STATUS_TEXT: dict[SessionState, tuple[str, str]] = {
    S.UNINITIALIZED: ("Ready to initialize", "info"),
    S.TOKEN_REQUESTED: ("Getting access token...", "info"),
    S.SESSION_CREATED: ("Initializing voice client...", "info"),
    S.SESSION_READY: ("Ready to make calls", "ready"),
    S.REGISTRATION_FAILED: ("Voice client not registered, waiting...", "warning"),
    S.CONNECTING: ("Connecting...", "info"),
    S.CALL_ACTIVE: ("Call in progress", "ready"),
    S.CALL_ENDED: ("Call ended", "info"),
}


def advance(state: SessionState, trigger: Trigger) -> SessionState:
    return TRANSITIONS.get((state, trigger), state)


def call_enabled(state: SessionState) -> bool:
    return state in CALL_ENABLED_STATES


def hangup_enabled(state: SessionState) -> bool:
    return state in HANGUP_ENABLED_STATES


def client_table(*, registration_fallback_ms: int) -> dict[str, Any]:
    """JSON-serializable description of the machine for the page script."""

    transitions: dict[str, dict[str, str]] = {}
    for (state, trigger), target in TRANSITIONS.items():
        transitions.setdefault(state.value, {})[trigger.value] = target.value

    return {
        "initial": SessionState.UNINITIALIZED.value,
        "transitions": transitions,
        "callEnabled": sorted(s.value for s in CALL_ENABLED_STATES),
        "hangupEnabled": sorted(s.value for s in HANGUP_ENABLED_STATES),
        "status": {state.value: {"text": text, "kind": kind} for state, (text, kind) in STATUS_TEXT.items()},
        "registrationFallbackMs": registration_fallback_ms,
    }
