"""Cross-origin rules for the browser client."""

from __future__ import annotations

from flask import Flask
from flask_cors import CORS

API_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def parse_origins(raw: str | None) -> list[str]:
    """Split ``CORS_ORIGINS``; an empty list means "any origin"."""
    origins = [o.strip() for o in (raw or "").split(",") if o.strip()]
    return [] if origins == ["*"] else origins


def init_app(app: Flask) -> None:
    """Open ``/api/*`` to the configured origins.

    Credentials are only allowed with an explicit origin list; the
    ``Authorization`` header and ``X-Request-ID`` always cross.
    """
    origins = parse_origins(app.config.get("CORS_ORIGINS"))
    CORS(
        app,
        resources={r"/api/*": {"origins": origins or "*"}},
        methods=API_METHODS,
        supports_credentials=bool(origins),
        allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
        expose_headers=["X-Request-ID"],
        max_age=app.config.get("CORS_MAX_AGE", 600),
    )
