"""Engine/session helpers for the text_blobs table."""
from __future__ import annotations

from contextlib import contextmanager
from functools import lru_cache
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base

from clinic.core.config import get_settings

Base = declarative_base()


@lru_cache
def get_engine() -> Engine:
    """Engine for DATABASE_URL; the text_blobs table is created on first use."""
    url = (get_settings().database_url or "").strip()
    if not url:
        raise RuntimeError("DATABASE_URL must be configured when CLINIC_STORAGE=sql.")
    from . import models  # noqa: F401  # registers TextBlob on Base.metadata

    engine = create_engine(url)
    Base.metadata.create_all(bind=engine)
    return engine


@contextmanager
def get_session() -> Iterator[Session]:
    with Session(get_engine()) as session:
        yield session
