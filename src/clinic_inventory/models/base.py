"""
Shared model configuration.

Records are stored and served with camelCase keys; Python code uses
snake_case attributes.
"""

from datetime import datetime, timezone
from typing import Any, Dict

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Interpret naive datetimes as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class CamelModel(BaseModel):
    """Base model serialized with camelCase aliases."""

    class Config:
        """Pydantic configuration."""
        alias_generator = to_camel
        populate_by_name = True

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready dict with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)
