# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

import atexit

from flask import Flask

from peopledir.domain import Storage
from peopledir.infrastructure.admin_setup import ensure_admin
from peopledir.infrastructure.container import Container
from peopledir.shared.config import AppConfig, load_config
from peopledir.shared.logging import logger, setup_logging
from peopledir.shared.middleware.error_handler import configure_error_handling
from peopledir.shared.middleware.request_logger import configure_request_logging


def create_app(config: AppConfig | None = None, storage: Storage | None = None) -> Flask:
    """Build the Flask application and start the session sweeper.

    ``storage`` replaces the backend selected by ``STORAGE_BACKEND``; tests use
    it to share one store between the app and their assertions.
    """

    config = config or load_config()
    setup_logging(debug_mode=config.debug_logging)

    container = Container(config, storage=storage)

    app = Flask(__name__)
    app.config.update(SECRET_KEY=config.secret_key)
    app.extensions["peopledir"] = container

    configure_error_handling(app, debug_mode=config.debug_logging)
    configure_request_logging(
        app, debug_mode=config.debug_logging, auth_header=config.session.auth_header
    )

    app.register_blueprint(container.auth_controller.as_blueprint())
    app.register_blueprint(container.people_controller.as_blueprint())
    app.register_blueprint(container.users_controller.as_blueprint())

    if config.admin_login and config.admin_password:
        ensure_admin(container.storage, config.admin_login, config.admin_password)

    container.session_sweeper.start()
    atexit.register(container.close)

    logger.info(f"Flask app initialized (env={config.app_env}, storage={config.storage_backend})")
    return app


def get_container(app: Flask) -> Container:
    return app.extensions["peopledir"]
