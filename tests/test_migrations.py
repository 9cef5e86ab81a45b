"""
Tests for the versioned schema migrations.

Runs against throwaway in-memory SQLite engines.
"""

import pytest
from sqlalchemy import inspect

from app.infrastructure.db.engine import build_engine
from app.infrastructure.db.migrations import (
    MIGRATIONS,
    Migration,
    applied_versions,
    apply_migrations,
)


@pytest.fixture
def engine():
    engine = build_engine("sqlite://")
    yield engine
    engine.dispose()


class TestApplyMigrations:
    """Tests for apply_migrations and applied_versions."""

    def test_fresh_database_applies_everything(self, engine) -> None:
        applied = apply_migrations(engine)

        assert applied == [m.version for m in MIGRATIONS]
        assert "subscriptions" in inspect(engine).get_table_names()

    def test_second_run_is_a_no_op(self, engine) -> None:
        apply_migrations(engine)
        assert apply_migrations(engine) == []

    def test_applied_versions_on_empty_database(self, engine) -> None:
        assert applied_versions(engine) == set()

    def test_applied_versions_after_apply(self, engine) -> None:
        apply_migrations(engine)
        assert applied_versions(engine) == {m.version for m in MIGRATIONS}

    def test_pending_migrations_run_in_version_order(self, engine) -> None:
        extra = (
            Migration(
                version=3,
                description="add notes",
                statements=("ALTER TABLE subscriptions ADD COLUMN notes TEXT",),
            ),
            Migration(
                version=2,
                description="add currency",
                statements=("ALTER TABLE subscriptions ADD COLUMN currency TEXT",),
            ),
        )
        apply_migrations(engine)

        applied = apply_migrations(engine, MIGRATIONS + extra)

        assert applied == [2, 3]
        columns = {c["name"] for c in inspect(engine).get_columns("subscriptions")}
        assert {"notes", "currency"} <= columns
