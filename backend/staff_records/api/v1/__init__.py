"""Version 1 blueprints and the prefix each one is mounted at."""

from __future__ import annotations

from flask import Blueprint

from .acts import bp as acts_bp
from .auth import bp as auth_bp
from .employees import bp as employees_bp
from .health import bp as health_bp
from .principals import bp as principals_bp
from .sites import institutions_bp, sites_bp

API_VERSION = "v1"

REGISTRY: tuple[tuple[Blueprint, str], ...] = (
    (health_bp, ""),
    (auth_bp, "auth"),
    (employees_bp, "employees"),
    (principals_bp, "principals"),
    (acts_bp, "administrative-acts"),
    (sites_bp, "sites"),
    (institutions_bp, "institutions"),
)
