# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Command line entry point: ``python -m peopledir {serve,init-db}``."""

from __future__ import annotations

import argparse
import getpass
import sys

from peopledir.app import create_app
from peopledir.infrastructure.admin_setup import ensure_admin
from peopledir.infrastructure.container import Container
from peopledir.shared.config import load_config
from peopledir.shared.logging import logger, setup_logging


def _serve(args: argparse.Namespace) -> int:
    app = create_app()
    app.run(host=args.host, port=args.port, debug=args.debug, use_reloader=False)
    return 0


def _init_db(args: argparse.Namespace) -> int:
    config = load_config()
    setup_logging(debug_mode=config.debug_logging)
    if config.storage_backend != "sql":
        logger.error("init-db: STORAGE_BACKEND must be 'sql'")
        return 2

    container = Container(config)
    try:
        # Building the storage creates the schema.
        storage = container.storage
        login = args.admin or config.admin_login
        if login:
            password = config.admin_password or getpass.getpass(f"Password for {login}: ")
            ensure_admin(storage, login, password)
    finally:
        container.close()
    logger.info("init-db: done")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="peopledir", description="Personnel directory service")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="run the development server")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=5000)
    serve.add_argument("--debug", action="store_true")
    serve.set_defaults(func=_serve)

    init_db = sub.add_parser("init-db", help="create tables and an initial administrator")
    init_db.add_argument("--admin", help="login of the administrator to create")
    init_db.set_defaults(func=_init_db)

    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
