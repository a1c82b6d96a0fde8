# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Schema management entrypoint: ``python -m passport.manage <command>``."""

from __future__ import annotations

import argparse

from sqlalchemy.exc import SQLAlchemyError

from passport.infrastructure.db import ENGINE, drop_db, init_db
from passport.infrastructure.health import check_database
from passport.shared.logging import setup_logging


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Manage the passport database schema")
    parser.add_argument(
        "command",
        choices=("create-schema", "drop-schema", "check-db"),
        help="Operation to run against DATABASE_URL",
    )
    args = parser.parse_args(argv)
    setup_logging()

    if args.command == "create-schema":
        init_db(ENGINE)
        print("Schema created")
    elif args.command == "drop-schema":
        drop_db(ENGINE)
        print("Schema dropped")
    else:
        try:
            check_database(ENGINE)
        except SQLAlchemyError as exc:
            print(f"Database unavailable: {type(exc).__name__}")
            return 1
        print("Database reachable")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
