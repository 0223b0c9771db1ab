from pathlib import Path
from sqlalchemy import MetaData, create_engine
from sqlalchemy.engine import Engine

from .config import settings

# Naming convention for constraints
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s"
}

metadata = MetaData(naming_convention=NAMING_CONVENTION)


def make_engine(db_url: str = settings.db_url, echo: bool = settings.db_echo) -> Engine:
    # SQLite connections are shared across server threads
    if db_url.startswith("sqlite"):
        if db_url.startswith("sqlite:///./"):
            Path(db_url.replace("sqlite:///", "", 1)).parent.mkdir(parents=True, exist_ok=True)
        return create_engine(db_url, echo=echo, connect_args={"check_same_thread": False})
    return create_engine(db_url, echo=echo, pool_pre_ping=True)


engine: Engine | None = None


def get_engine() -> Engine:
    """Get or create the database engine."""
    global engine

    if engine is None:
        engine = make_engine()
    return engine


def init_db(bind: Engine | None = None) -> None:
    """Create all tables. Use Alembic migrations in production."""
    from . import models  # noqa: F401  registers the tables on metadata

    metadata.create_all(bind=bind or get_engine())


def close_db() -> None:
    global engine

    if engine is not None:
        engine.dispose()
        engine = None
