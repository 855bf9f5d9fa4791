#!/usr/bin/env python3
"""Upgrade the database to the latest schema.

Creates the post, info, tag and comment tables and seeds the post statuses
and types the registry reads. Failures are reported to Logfire.
"""

import sys
import logfire
from alembic import command
from alembic.config import Config

from quill.config import Settings
from quill.util.logging import setup_logging
from quill.util.observability import configure_logfire


def main(revision: str = "head") -> int:
    settings = Settings()
    configure_logfire(settings)
    setup_logging(settings)

    with logfire.span("migrations.upgrade", revision=revision):
        try:
            command.upgrade(Config("alembic.ini"), revision)
        except Exception as e:
            logfire.error(
                "Database migration failed",
                error=str(e),
                error_type=type(e).__name__,
                _exc_info=sys.exc_info(),
            )
            # Re-raise so deployment fails instead of running on a broken schema
            raise

    logfire.info("Database migrated", revision=revision)
    return 0


if __name__ == "__main__":
    sys.exit(main(*sys.argv[1:2]))
