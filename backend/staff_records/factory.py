"""``create_app``: settings, extensions, blueprints, error handlers, CLI."""

from __future__ import annotations

from flask import Flask

from staff_records import cli
from staff_records.api import init_app as init_api
from staff_records.core import cors, errors, extensions, logger, proxy, scheduler, security
from staff_records.core.config import BaseConfig, get_config, validate_config

# Order matters: the scheduler needs the blacklist that security installs
_INITIALIZERS = (
    proxy.init_app,
    extensions.init_app,
    logger.init_app,
    security.init_app,
    scheduler.init_app,
    cors.init_app,
    init_api,
    errors.init_app,
    cli.init_app,
)


def create_app(config: str | type[BaseConfig] | object | None = None) -> Flask:
    """Build the application.

    ``config`` is anything ``app.config.from_object`` accepts; ``None`` picks
    the class for ``APP_ENV``. An optional ``instance/config.py`` overrides it.

    :raises ConfigurationError: A required setting is missing or invalid.
    """
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(config if config is not None else get_config())
    app.config.from_pyfile("config.py", silent=True)
    validate_config(app.config)

    logger.configure_logging(app.config.get("LOG_LEVEL", "INFO"))
    for init in _INITIALIZERS:
        init(app)
    return app
