"""SQL backend for the text store (engine, session, TextBlob model)."""

from .session import Base, get_engine, get_session

__all__ = ["Base", "get_engine", "get_session"]
