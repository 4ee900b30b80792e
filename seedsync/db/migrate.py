"""Create the local state tables used by the seed importer."""

from __future__ import annotations

import logging
import pathlib
import sys

from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from seedsync.db.session import create_engine_from_env

logger = logging.getLogger(__name__)

SCHEMA_PATH = pathlib.Path(__file__).with_name("schema.sql")


def schema_statements(sql: str | None = None) -> list[str]:
    """Split ``schema.sql`` into executable statements, dropping comments."""
    if sql is None:
        sql = SCHEMA_PATH.read_text()
    lines = [line for line in sql.splitlines() if not line.strip().startswith("--")]
    return [chunk.strip() for chunk in "\n".join(lines).split(";") if chunk.strip()]


def run_migrations(engine: Engine) -> None:
    """Apply every statement in one transaction; statements are idempotent."""
    statements = schema_statements()
    with engine.begin() as conn:
        for statement in statements:
            conn.execute(text(statement))
    logger.debug("Applied %s schema statements", len(statements))


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    engine = create_engine_from_env()
    try:
        run_migrations(engine)
    except SQLAlchemyError as exc:
        logger.error("Migration failed: %s", exc)
        sys.exit(2)
    logger.info("Seed state tables ready at %s", engine.url.render_as_string(hide_password=True))


if __name__ == "__main__":
    main()
