"""HTTP surface, mounted under ``API_BASE_PREFIX`` plus the version segment."""

from __future__ import annotations

import logging

from flask import Flask

log = logging.getLogger(__name__)


def url_prefix(*segments: str) -> str:
    """``url_prefix("/api/", "v1", "")`` -> ``"/api/v1"``."""
    return "/" + "/".join(s.strip("/") for s in segments if s.strip("/"))


def init_app(app: Flask) -> None:
    from staff_records.api import v1

    root = url_prefix(app.config.get("API_BASE_PREFIX", "/api"), v1.API_VERSION)
    for blueprint, prefix in v1.REGISTRY:
        mounted = url_prefix(root, prefix)
        app.register_blueprint(blueprint, url_prefix=mounted)
        log.debug("Blueprint %s mounted at %s", blueprint.name, mounted)


__all__ = ["init_app", "url_prefix"]
