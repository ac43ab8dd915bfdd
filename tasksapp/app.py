# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Flask

from tasksapp.infrastructure.container import Container
from tasksapp.infrastructure.db import init_db
from tasksapp.shared.config import AppConfig, load_config
from tasksapp.shared.logging import logger, setup_logging
from tasksapp.shared.middleware.error_handler import configure_error_handling
from tasksapp.shared.middleware.request_logger import configure_request_logging
from tasksapp.shared.utils.clock import Clock


def create_app(config: AppConfig | None = None, *, clock: Clock | None = None) -> Flask:
    config = config or load_config()
    setup_logging(config.logging, debug_mode=config.debug_logging)

    container = Container(config, clock=clock)
    init_db(container.engine)

    app = Flask(__name__)
    app.extensions["tasksapp.container"] = container
    configure_error_handling(app, config)
    configure_request_logging(app, config)

    app.register_blueprint(container.auth_controller.as_blueprint())

    @app.after_request
    def _add_security_headers(resp):
        resp.headers.setdefault("X-Frame-Options", "DENY")
        resp.headers.setdefault("Referrer-Policy", "no-referrer")
        resp.headers.setdefault("X-Content-Type-Options", "nosniff")
        resp.headers.setdefault("Cache-Control", "no-store")
        resp.headers.setdefault("Cross-Origin-Resource-Policy", "same-origin")
        resp.headers.setdefault("Cross-Origin-Opener-Policy", "same-origin")

        if config.security.enable_hsts:
            resp.headers.setdefault(
                "Strict-Transport-Security",
                "max-age=31536000; includeSubDomains; preload",
            )

        return resp

    logger.info(f"Flask app initialized env={config.app_env}")
    return app


__all__ = ["create_app"]
