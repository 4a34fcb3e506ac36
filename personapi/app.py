"""Application factory and server entry point."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Sequence

from dotenv import load_dotenv
from flask import Flask
from sqlalchemy import Engine
from sqlalchemy.orm import sessionmaker

from .database import init_db, run_migrations
from .handlers import create_blueprint

logger = logging.getLogger(__name__)

DEFAULT_PORT = "8080"


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "level": record.levelname.lower(),
            "msg": record.getMessage(),
            "time": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
        }
        if record.exc_info:
            entry["error"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


def _configure_logging() -> None:
    package_logger = logging.getLogger("personapi")
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(_JsonFormatter())
    package_logger.handlers = [handler]
    package_logger.setLevel(logging.INFO)
    package_logger.propagate = False


def create_app(engine: Engine) -> Flask:
    """Build the Flask application serving the people API."""
    app = Flask(__name__)
    app.json.ensure_ascii = False
    app.register_blueprint(create_blueprint(sessionmaker(bind=engine)))
    return app


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Load settings, prepare the database and serve the API."""
    parser = argparse.ArgumentParser(
        prog="personapi", description="Serve the people REST API."
    )
    parser.parse_args(argv)
    _configure_logging()

    env_path = Path(".env")
    if not env_path.is_file():
        logger.critical("Failed to load .env: %s not found", env_path.resolve())
        return 1
    load_dotenv(env_path)

    try:
        engine = init_db()
    except Exception as exc:
        logger.critical("Database connection failed: %s", exc)
        return 1
    try:
        run_migrations(engine)
    except Exception as exc:
        logger.critical("Migrations failed: %s", exc)
        return 1

    port_text = os.environ.get("PORT") or DEFAULT_PORT
    try:
        port = int(port_text)
    except ValueError:
        logger.critical("Invalid PORT: %r", port_text)
        return 1

    app = create_app(engine)
    logger.info("Server starting on port %d", port)
    try:
        app.run(host="0.0.0.0", port=port)
    except OSError as exc:
        logger.critical("Server failed to start: %s", exc)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())