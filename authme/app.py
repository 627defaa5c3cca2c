# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import click
from flask import Flask, Response
from flask_cors import CORS

from authme.infrastructure.container import Container
from authme.infrastructure.demo_setup import seed_demo_user
from authme.shared.config import AppConfig, load_config
from authme.shared.logging import logger, setup_logging
from authme.shared.middleware.error_handler import configure_error_handling
from authme.shared.middleware.request_logger import configure_request_logging


def _configure_cors(app: Flask, config: AppConfig) -> None:
    # the dev frontend runs on its own origin; production serves it from here
    if config.is_production():
        return
    cors_kwargs: dict[str, object] = {
        "resources": {r"/api/*": {"origins": config.security.allowed_origins}}
    }
    if any(o != "*" for o in config.security.allowed_origins):
        cors_kwargs["supports_credentials"] = True
    CORS(app, **cors_kwargs)


def _configure_security_headers(app: Flask, config: AppConfig) -> None:
    @app.after_request
    def _add_security_headers(resp: Response) -> Response:
        resp.headers.setdefault("X-Frame-Options", "SAMEORIGIN")
        resp.headers.setdefault("Referrer-Policy", "no-referrer")
        resp.headers.setdefault("X-Content-Type-Options", "nosniff")
        resp.headers.setdefault("X-DNS-Prefetch-Control", "off")
        resp.headers.setdefault("X-Permitted-Cross-Domain-Policies", "none")
        resp.headers.setdefault("Cross-Origin-Opener-Policy", "same-origin")
        # images served by URL must render from other origins
        resp.headers.setdefault("Cross-Origin-Resource-Policy", "cross-origin")

        if config.security.enable_hsts:
            resp.headers.setdefault(
                "Strict-Transport-Security",
                "max-age=31536000; includeSubDomains",
            )

        return resp


def _register_cli(app: Flask, container: Container) -> None:
    @app.cli.command("seed-demo")
    def seed_demo() -> None:
        """Create the demo user if it does not exist yet."""
        user = seed_demo_user(container.user_repository, container.register_user_use_case)
        click.echo(f"Demo user ready: {user.username} <{user.email}> (id={user.id})")


def create_app(config: AppConfig | None = None) -> Flask:
    config = config or load_config()
    setup_logging(config.log_level, debug_mode=config.debug_logging)

    container = Container(config)
    container.database.init_db()

    app = Flask(__name__)
    app.extensions["authme.container"] = container

    configure_request_logging(app, config)
    configure_error_handling(app, config)
    container.csrf_guard.init_app(app)
    _configure_cors(app, config)
    _configure_security_headers(app, config)

    app.register_blueprint(container.session_controller.as_blueprint())
    app.register_blueprint(container.users_controller.as_blueprint())
    if config.is_production():
        app.register_blueprint(container.frontend_controller.as_blueprint())
    else:
        app.register_blueprint(container.csrf_controller.as_blueprint())

    _register_cli(app, container)

    logger.info(f"Flask app initialized (env={config.app_env})")
    return app


if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=8000, debug=True)
