"""
SQLAlchemy engine factory.

One engine (and its connection pool) is shared by the whole process.
"""

import logging
from functools import lru_cache

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine

from app.core.config import settings

logger = logging.getLogger(__name__)


def build_engine(dsn: str) -> Engine:
    """Build a SQLAlchemy engine for the given DSN.

    Bound parameters are kept out of SQL logs and error messages.
    """
    return create_engine(dsn, pool_pre_ping=True, hide_parameters=True)


@lru_cache(maxsize=1)
def get_engine() -> Engine:
    """Return the process-wide engine built from application settings."""
    engine = build_engine(settings.get_database_dsn())
    logger.info("Database engine created for %s", engine.url.render_as_string(hide_password=True))
    return engine
