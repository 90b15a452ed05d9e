"""Base model classes and mixins."""

from datetime import datetime

from sqlalchemy import DateTime, MetaData, func, inspect
from sqlalchemy.orm import Mapped, as_declarative, declared_attr, mapped_column

from restify.utils.naming import camel_to_snake, pluralize

# Deterministic constraint names, so migrations can address them
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


@as_declarative(metadata=MetaData(naming_convention=NAMING_CONVENTION))
class Base:
    """Base model class for repository backed models."""

    __name__: str

    # BlogPost -> blog_posts, unless the model declares its own table
    @declared_attr
    def __tablename__(cls) -> str:
        return pluralize(camel_to_snake(cls.__name__))

    def __repr__(self) -> str:
        identity = inspect(self).identity
        key = identity[0] if identity and len(identity) == 1 else identity
        return f"<{type(self).__name__} {key}>"


class TimestampMixin:
    """Mixin for created_at and updated_at timestamps."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
