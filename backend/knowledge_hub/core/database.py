from sqlalchemy import create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker
from ..config import settings
import logging

logger = logging.getLogger(__name__)

is_sqlite = settings.database_url.startswith("sqlite")

# SQLite connections are shared across the threadpool that serves sync routes
connect_args = {"check_same_thread": False, "timeout": 30.0} if is_sqlite else {}

engine = create_engine(
    settings.database_url,
    connect_args=connect_args,
    echo=settings.debug,
    pool_pre_ping=True,  # Verify pooled connections before handing them out
)


def enable_sqlite_pragmas(dbapi_conn, connection_record):
    """Turn on foreign keys (for ON DELETE CASCADE) and WAL for SQLite connections"""
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA busy_timeout=30000")
    cursor.close()


if is_sqlite:
    event.listen(engine, "connect", enable_sqlite_pragmas)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """Dependency that checks a session out of the pool for one request"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """Create all tables that do not exist yet"""
    # Models must be imported so they register on Base.metadata
    from .. import models  # noqa: F401

    logger.info("Initializing database tables...")
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables initialized successfully")
