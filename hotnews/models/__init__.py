"""SQLAlchemy ORM models."""

from hotnews.models.base import Base, TimestampMixin, UUIDMixin
from hotnews.models.item import Item, ItemKind
from hotnews.models.source import Source, SourceType

__all__ = [
    "Base",
    "UUIDMixin",
    "TimestampMixin",
    "Source",
    "SourceType",
    "Item",
    "ItemKind",
]
