"""``flask seed`` and ``flask blacklist`` command groups."""

from __future__ import annotations

from flask import Flask

from .blacklist import blacklist_cli
from .seed import seed_cli


def init_app(app: Flask) -> None:
    for group in (seed_cli, blacklist_cli):
        app.cli.add_command(group)
