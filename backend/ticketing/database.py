from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
from ticketing.core.config import settings
import os

if os.getenv("PYTEST_RUN") == "1":
    SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"
else:
    SQLALCHEMY_DATABASE_URL = settings.SQLALCHEMY_DATABASE_URL


def _set_sqlite_pragma(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    try:
        # WAL improves read concurrency; NORMAL reduces fsync pressure.
        cursor.execute("PRAGMA journal_mode=WAL;")
        cursor.execute("PRAGMA synchronous=NORMAL;")
        # Concurrent reservations queue on the write lock instead of failing (ms)
        cursor.execute("PRAGMA busy_timeout=15000;")
    finally:
        cursor.close()


def create_db_engine(url: str) -> Engine:
    """Build an engine for *url* with the pool and SQLite settings used app-wide.

    Every process builds one engine at start-up and hands sessions from it to
    the request handlers; nothing else holds a connection between requests.
    """
    is_sqlite = url.startswith("sqlite")
    # Avoid stale idle connections causing first-hit failures after inactivity
    pool_kwargs = {"pool_pre_ping": True}
    if is_sqlite:
        # SQLite uses a per-process connection; pass connect_args and avoid pool sizing
        connect_args = {"check_same_thread": False, "timeout": 15}
        if ":memory:" in url:
            # One shared connection, otherwise every thread sees its own empty database
            pool_kwargs["poolclass"] = StaticPool
    else:
        connect_args = {}
        pool_kwargs.update({
            "pool_size": int(os.getenv("DB_POOL_SIZE") or 6),
            "max_overflow": int(os.getenv("DB_MAX_OVERFLOW") or 6),
            "pool_recycle": int(os.getenv("DB_POOL_RECYCLE") or 300),
            "pool_timeout": float(os.getenv("DB_POOL_TIMEOUT") or 5.0),
        })

    db_engine = create_engine(url, connect_args=connect_args, **pool_kwargs)
    if is_sqlite and ":memory:" not in url:
        event.listen(db_engine, "connect", _set_sqlite_pragma)
    return db_engine


engine = create_db_engine(SQLALCHEMY_DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


# Dependency
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

