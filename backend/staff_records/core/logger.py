"""Structured logs: one JSON document per line on stdout, tagged with the request id."""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from flask import Flask, Response, g, has_request_context, request

REQUEST_ID_HEADER = "X-Request-ID"
# Inbound headers whose value becomes the request id, first match wins
INBOUND_ID_HEADERS = (REQUEST_ID_HEADER, "X-Correlation-ID")

# Attributes every LogRecord has; anything else came in through ``extra=``
_BUILTIN_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime", "request_id"}


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        document: dict[str, Any] = {
            "time": datetime.fromtimestamp(record.created, timezone.utc).isoformat(
                timespec="milliseconds"
            ),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", None),
        }
        for key, value in vars(record).items():
            if key not in _BUILTIN_ATTRS:
                document[key] = value
        if record.exc_info:
            document["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(document, default=str)


def _stamp_request_id(record: logging.LogRecord) -> bool:
    record.request_id = ensure_request_id() if has_request_context() else None
    return True


def ensure_request_id() -> str:
    """Id of the current request.

    The first call in a request adopts the caller's ``X-Request-ID`` or
    ``X-Correlation-ID`` header, or mints a UUID, and caches it on ``g``.
    Outside a request every call returns a new UUID.
    """
    if not has_request_context():
        return str(uuid4())
    if "request_id" not in g:
        inbound = (request.headers.get(name, "").strip() for name in INBOUND_ID_HEADERS)
        g.request_id = next(filter(None, inbound), None) or str(uuid4())
    return g.request_id


def configure_logging(level: str | int = "INFO") -> None:
    """Replace the root handlers with a single JSON handler on stdout."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())
    handler.addFilter(_stamp_request_id)
    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level.upper() if isinstance(level, str) else level)
    # one INFO line per job run otherwise
    logging.getLogger("apscheduler").setLevel(logging.WARNING)


def init_app(app: Flask) -> None:
    app.logger.addFilter(_stamp_request_id)

    @app.before_request
    def _assign_request_id() -> None:
        # g survives across requests when the app context was pushed by the caller
        g.pop("request_id", None)
        ensure_request_id()

    @app.after_request
    def _echo_request_id(response: Response) -> Response:
        response.headers.setdefault(REQUEST_ID_HEADER, ensure_request_id())
        return response


__all__ = ["JSONFormatter", "configure_logging", "ensure_request_id", "init_app"]
