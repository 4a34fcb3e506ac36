"""Database connection and schema setup."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from typing import Optional, Union

from sqlalchemy import URL, Engine, create_engine, text

from .models import Base

logger = logging.getLogger(__name__)


def database_url(environ: Optional[Mapping[str, str]] = None) -> URL:
    """Build the PostgreSQL URL from the DB_* environment variables."""
    env = os.environ if environ is None else environ
    port_text = env.get("DB_PORT", "")
    try:
        port = int(port_text) if port_text else None
    except ValueError as exc:
        raise ValueError(f"invalid DB_PORT: {port_text!r}") from exc
    return URL.create(
        drivername="postgresql",
        username=env.get("DB_USER") or None,
        password=env.get("DB_PASSWORD") or None,
        host=env.get("DB_HOST") or None,
        port=port,
        database=env.get("DB_NAME") or None,
        query={"sslmode": "disable"},
    )


def init_db(url: Union[str, URL, None] = None) -> Engine:
    """Open an engine and verify the connection; errors propagate."""
    target = database_url() if url is None else url
    logger.info("Connecting to the database...")
    engine = create_engine(target)
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
    except Exception:
        logger.exception("Database connection failed")
        engine.dispose()
        raise
    logger.info("Database connected")
    return engine


def run_migrations(engine: Engine) -> None:
    """Bring the schema up to date; a schema already current is not an error."""
    logger.info("Running migrations...")
    Base.metadata.create_all(engine)