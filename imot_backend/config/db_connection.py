"""
Database connection configuration using SQLModel and PostgreSQL
"""
import os
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine

# Get database configuration from environment variables
ADMIN_USER = os.getenv("ADMIN_USER", "postgres")
PASSWORD = os.getenv("PASSWORD", "password")
HOST = os.getenv("HOST", "localhost")
DB_NAME = os.getenv("DB_NAME", "imot_db")
DB_PORT = os.getenv("DB_PORT", "5432")

# DATABASE_URL overrides the PostgreSQL settings above (e.g. sqlite:// for local runs)
DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"postgresql://{ADMIN_USER}:{PASSWORD}@{HOST}:{DB_PORT}/{DB_NAME}"
)

DEBUG = os.getenv("DEBUG", "false").lower() == "true"


def build_engine(database_url: str = DATABASE_URL):
    """Create a SQLModel engine for the given URL"""
    if database_url.startswith("sqlite"):
        # In-memory SQLite must share a single connection across threads
        return create_engine(
            database_url,
            echo=DEBUG,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool
        )
    return create_engine(
        database_url,
        echo=DEBUG,
        pool_size=5,
        max_overflow=10
    )


def init_db(engine) -> None:
    """Initialize database tables"""
    # Registers the tables on SQLModel.metadata
    import imot_backend.models  # noqa: F401
    SQLModel.metadata.create_all(engine)
