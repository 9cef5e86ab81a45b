"""
Versioned schema migrations.

Applied versions are recorded in the ``schema_migrations`` table and new
migrations are executed in ascending version order, each in its own
transaction. To change the schema, append a new ``Migration`` with the
next version number; never edit one that has shipped.

The DDL sticks to types and constraints understood by both PostgreSQL and
SQLite so the same migrations back the test suite.
"""

import logging
from dataclasses import dataclass

from sqlalchemy import text
from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)

MIGRATIONS_TABLE = "schema_migrations"


@dataclass(frozen=True)
class Migration:
    """One schema change: a version number and the statements it runs."""

    version: int
    description: str
    statements: tuple[str, ...]


MIGRATIONS: tuple[Migration, ...] = (
    Migration(
        version=1,
        description="create subscriptions table",
        statements=(
            """
            CREATE TABLE IF NOT EXISTS subscriptions (
                id           UUID PRIMARY KEY,
                service_name TEXT    NOT NULL,
                price        INTEGER NOT NULL CHECK (price >= 0),
                user_id      UUID    NOT NULL,
                start_month  DATE    NOT NULL,
                end_month    DATE,
                CHECK (end_month IS NULL OR end_month >= start_month)
            )
            """,
            "CREATE INDEX IF NOT EXISTS idx_subscriptions_user ON subscriptions (user_id)",
            "CREATE INDEX IF NOT EXISTS idx_subscriptions_service ON subscriptions (service_name)",
            "CREATE INDEX IF NOT EXISTS idx_subscriptions_period ON subscriptions (start_month, end_month)",
        ),
    ),
)


def applied_versions(engine: Engine) -> set[int]:
    """Return the set of migration versions already recorded."""
    with engine.begin() as conn:
        _ensure_migrations_table(conn)
        rows = conn.execute(text(f"SELECT version FROM {MIGRATIONS_TABLE}"))
        return {int(row.version) for row in rows}


def apply_migrations(
    engine: Engine, migrations: tuple[Migration, ...] = MIGRATIONS
) -> list[int]:
    """Apply every pending migration.

    Args:
        engine: Target database engine.
        migrations: Migrations to consider. Defaults to ``MIGRATIONS``.

    Returns:
        Versions applied by this call, in order. Empty if up to date.
    """
    done = applied_versions(engine)
    applied: list[int] = []

    for migration in sorted(migrations, key=lambda m: m.version):
        if migration.version in done:
            logger.debug("Migration %d already applied", migration.version)
            continue

        logger.info(
            "Applying migration %d: %s", migration.version, migration.description
        )
        with engine.begin() as conn:
            for statement in migration.statements:
                conn.execute(text(statement))
            conn.execute(
                text(f"INSERT INTO {MIGRATIONS_TABLE} (version) VALUES (:version)"),
                {"version": migration.version},
            )
        applied.append(migration.version)

    if applied:
        logger.info("Applied %d migration(s): %s", len(applied), applied)
    else:
        logger.info("Schema is up to date")
    return applied


def _ensure_migrations_table(conn) -> None:
    conn.execute(
        text(
            f"""
            CREATE TABLE IF NOT EXISTS {MIGRATIONS_TABLE} (
                version    INTEGER PRIMARY KEY,
                applied_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP
            )
            """
        )
    )
