from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
import logging

from learnvow.core.config import settings

logger = logging.getLogger(__name__)


def build_engine(database_url: str, timeout_seconds: float):
    """
    Creates an engine whose connections give up after `timeout_seconds`.
    PostgreSQL gets a server-side statement_timeout, SQLite a lock-wait timeout.
    """
    engine_kwargs = {}
    if database_url.startswith("sqlite"):
        engine_kwargs["connect_args"] = {"check_same_thread": False, "timeout": timeout_seconds}
    else:
        timeout_ms = int(timeout_seconds * 1000)
        engine_kwargs["connect_args"] = {"options": f"-c statement_timeout={timeout_ms}"}
        engine_kwargs["pool_timeout"] = timeout_seconds
        engine_kwargs["pool_pre_ping"] = True

    logger.debug(f"Creating engine for {database_url.split('@')[-1]} (timeout {timeout_seconds}s)")
    return create_engine(database_url, **engine_kwargs)


engine = build_engine(settings.DATABASE_URL, settings.ROW_STORE_TIMEOUT_SECONDS)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

def get_db():
    """
    Dependency to get a database session.
    Ensures the database session is always closed after the request.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

# In production the schema is managed with Alembic; this is for development.
def create_db_and_tables():
    # Models must be imported so they register with Base.metadata
    from learnvow import models  # noqa: F401
    Base.metadata.create_all(bind=engine)

if __name__ == "__main__":
    print("Creating database tables based on models...")
    create_db_and_tables()
    print("Database tables created (if they didn't exist).")
