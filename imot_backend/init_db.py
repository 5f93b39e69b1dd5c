#!/usr/bin/env python3
"""
Initialize database tables
"""
import logging

from imot_backend.config.db_connection import DATABASE_URL, build_engine, init_db
from imot_backend.config.logging_config import setup_logging

logger = logging.getLogger(__name__)


def init_tables():
    """Initialize all tables"""
    engine = build_engine(DATABASE_URL)
    logger.info(f"Creating tables on {engine.url.render_as_string(hide_password=True)}")
    init_db(engine)
    logger.info("Tables created successfully!")


if __name__ == "__main__":
    setup_logging()
    init_tables()
