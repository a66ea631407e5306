import os
from contextlib import contextmanager
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
from rentacar.config import settings

# engine argument -> (environment variable, default, lowest allowed, highest allowed)
# QueuePool state is per process, so several workers multiply these numbers.
POOL_OPTIONS = {
    "pool_size": ("DB_POOL_SIZE", 5, 1, 20),
    "max_overflow": ("DB_MAX_OVERFLOW", 2, 0, 20),
    "pool_timeout": ("DB_POOL_TIMEOUT", 10, 2, 30),
    "pool_recycle": ("DB_POOL_RECYCLE", 3600, 300, 7200),
}


def _clamped_env_int(name: str, default: int, minimum: int, maximum: int) -> int:
    raw = os.getenv(name)
    try:
        value = int(str(raw).strip()) if raw is not None else default
    except ValueError:
        value = default
    return min(max(value, minimum), maximum)


def _pool_settings() -> dict:
    return {
        option: _clamped_env_int(env_name, default, low, high)
        for option, (env_name, default, low, high) in POOL_OPTIONS.items()
    }


def _build_engine():
    url = settings.database_url
    if settings.is_sqlite():
        # An in-memory database lives inside one connection; every session must share it.
        kwargs = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in url:
            kwargs["poolclass"] = StaticPool
        return create_engine(url, echo=settings.sql_echo, **kwargs), {}

    pool = _pool_settings()
    # pool_timeout bounds how long a store call waits for a connection
    return create_engine(url, echo=settings.sql_echo, pool_pre_ping=True, **pool), pool


engine, _active_pool = _build_engine()

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


@contextmanager
def get_db():
    """Context manager for getting database session"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_db_session():
    """Get a database session directly (caller responsible for closing)"""
    return SessionLocal()


@contextmanager
def transaction(db: Session):
    """Run a unit of work: commit when the block succeeds, roll back on any error."""
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise


def init_db() -> None:
    """Create all tables registered on Base (used by tests and the operator CLI)."""
    from rentacar import models  # noqa: F401  # ensure models are registered

    Base.metadata.create_all(bind=engine)


def get_runtime_db_pool_settings() -> dict:
    runtime = {"database_backend": "sqlite" if settings.is_sqlite() else "server"}
    runtime.update({option: _active_pool.get(option) for option in POOL_OPTIONS})
    return runtime
