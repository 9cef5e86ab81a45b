"""
CLI entry point for operational tasks.

Usage:
    # Apply pending schema migrations
    python -m app.cli migrate

    # Show which migration versions are applied
    python -m app.cli migrate --status

    # Serve the API
    python -m app.cli serve --host 0.0.0.0 --port 8081
"""

import argparse
import logging
import sys

from app.core.config import settings
from app.shared.logging import configure_logging

logger = logging.getLogger(__name__)


def cmd_migrate(args: argparse.Namespace) -> None:
    """Apply pending migrations, or report their status."""
    from app.infrastructure.db.engine import get_engine
    from app.infrastructure.db.migrations import (
        MIGRATIONS,
        applied_versions,
        apply_migrations,
    )

    engine = get_engine()
    if args.status:
        done = applied_versions(engine)
        for migration in MIGRATIONS:
            state = "applied" if migration.version in done else "pending"
            logger.info("%3d  %-8s %s", migration.version, state, migration.description)
        return

    apply_migrations(engine)


def cmd_serve(args: argparse.Namespace) -> None:
    """Run the API under uvicorn."""
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=args.host,
        port=args.port,
        log_level=settings.log_level.lower(),
    )


def main(argv: list[str] | None = None) -> None:
    """Parse arguments and dispatch to a sub-command."""
    parser = argparse.ArgumentParser(
        prog="subscriptions-manager",
        description="Subscription Manager operational commands",
    )
    sub = parser.add_subparsers(dest="command")

    p_migrate = sub.add_parser("migrate", help="Apply database schema migrations")
    p_migrate.add_argument(
        "--status", action="store_true", help="List migrations instead of applying them"
    )

    p_serve = sub.add_parser("serve", help="Run the HTTP API")
    p_serve.add_argument("--host", default="0.0.0.0")
    p_serve.add_argument("--port", type=int, default=8081)

    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        sys.exit(1)

    configure_logging(level=settings.log_level, log_sql=settings.log_sql)

    commands = {
        "migrate": cmd_migrate,
        "serve": cmd_serve,
    }
    commands[args.command](args)


if __name__ == "__main__":
    main()
