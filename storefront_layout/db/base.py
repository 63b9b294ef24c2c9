from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from storefront_layout.config import settings


def _engine_connect_args() -> dict:
    if settings.STOREFRONT_DB_URL.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


engine: Engine = create_engine(
    settings.STOREFRONT_DB_URL,
    future=True,
    pool_pre_ping=True,
    connect_args=_engine_connect_args(),
)
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False, future=True)


class Base(DeclarativeBase):
    pass


def init_db() -> None:
    # Models must be imported so their tables are registered on Base.metadata.
    from storefront_layout.db import models  # noqa: F401

    Base.metadata.create_all(bind=engine)

