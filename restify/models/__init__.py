"""Database model base classes."""

from .base import Base, TimestampMixin

__all__ = [
    "Base",
    "TimestampMixin",
]
