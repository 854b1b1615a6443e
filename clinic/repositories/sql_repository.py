"""Text blob storage backed by SQLAlchemy."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from clinic.db.models import TextBlob
from clinic.db.session import get_session


class SQLTextStore:
    """One row per key in the text_blobs table."""

    def get(self, key: str) -> Optional[str]:
        with get_session() as session:
            entity = session.get(TextBlob, key)
            return entity.value if entity else None

    def set(self, key: str, value: str) -> None:
        now = datetime.now(timezone.utc)
        with get_session() as session:
            entity = session.get(TextBlob, key)
            if not entity:
                entity = TextBlob(key=key, value=value, updated_at=now)
                session.add(entity)
            else:
                entity.value = value
                entity.updated_at = now
            session.commit()
