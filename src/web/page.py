from __future__ import annotations

import json
from functools import lru_cache
from html import escape
from pathlib import Path
from string import Template

from web.session_machine import client_table

TEMPLATE_DIR = Path(__file__).resolve().parent / "templates"
STATIC_DIR = Path(__file__).resolve().parent / "static"


@lru_cache(maxsize=None)
def load_template(filename: str) -> Template:
    """Load an HTML template shipped with the codebase."""

    path = TEMPLATE_DIR / filename
    if not path.exists():
        raise RuntimeError(f"Template not found: {filename}")
    return Template(path.read_text(encoding="utf-8"))


def _script_json(data: object) -> str:
    # Safe inside <script type="application/json">.
    return json.dumps(data).replace("<", "\\u003c").replace(">", "\\u003e").replace("&", "\\u0026")


def render_page(*, sip_uri: str, registration_fallback_ms: int) -> str:
    """Render the calling page for the configured SIP target."""

    return load_template("index.html").substitute(
        sip_uri=escape(sip_uri),
        session_table=_script_json(client_table(registration_fallback_ms=registration_fallback_ms)),
    )
