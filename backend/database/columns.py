"""
Column helpers shared by the table models
"""

import uuid
from datetime import datetime, timezone
from typing import Type

from sqlalchemy import DateTime, Enum, TypeDecorator


def new_id() -> str:
    return str(uuid.uuid4())


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class UtcDateTime(TypeDecorator):
    """Timezone-aware timestamp. Naive values read back (SQLite) are tagged UTC."""

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_result_value(self, value, dialect):
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


def enum_column_type(enum_cls: Type, length: int = 32) -> Enum:
    """Store enum values (not member names) in a plain VARCHAR"""
    return Enum(
        enum_cls,
        values_callable=lambda members: [m.value for m in members],
        native_enum=False,
        length=length,
    )


LIKE_ESCAPE = "\\"


def contains_pattern(text: str) -> str:
    """LIKE pattern matching `text` literally anywhere. Pair with escape=LIKE_ESCAPE."""
    escaped = (
        text.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"
