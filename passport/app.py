# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Flask, Response

from passport.infrastructure.container import Container
from passport.infrastructure.db import init_db
from passport.shared.logging import logger, setup_logging
from passport.shared.middleware.error_handler import configure_error_handling
from passport.shared.middleware.request_logger import configure_request_logging

SECURITY_HEADERS = {
    "X-Frame-Options": "DENY",
    "X-Content-Type-Options": "nosniff",
    "Referrer-Policy": "no-referrer",
    "Cache-Control": "no-store",
    "Cross-Origin-Resource-Policy": "same-origin",
}
HSTS = "max-age=31536000; includeSubDomains"


def create_app(container: Container | None = None, *, bootstrap_schema: bool = True) -> Flask:
    container = container or Container()
    config = container.config

    setup_logging(debug_mode=config.debug_logging)
    if bootstrap_schema:
        init_db(container.engine)

    app = Flask(__name__)
    app.config.update(SECRET_KEY=config.secret_key)
    app.extensions["passport.container"] = container

    configure_error_handling(app)
    configure_request_logging(app)

    app.register_blueprint(container.misc_controller.as_blueprint())
    app.register_blueprint(container.auth_controller.as_blueprint())

    @app.after_request
    def _add_security_headers(resp: Response) -> Response:
        for name, value in SECURITY_HEADERS.items():
            resp.headers.setdefault(name, value)
        if config.enable_hsts:
            resp.headers.setdefault("Strict-Transport-Security", HSTS)
        return resp

    logger.info(f"passport app initialized env={config.app_env}")
    return app


if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=8080, debug=True)
