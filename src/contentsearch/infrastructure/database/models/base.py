"""Base model and mixins for SQLAlchemy models."""

from uuid import UUID

from sqlalchemy import BigInteger, Integer
from sqlalchemy.orm import DeclarativeBase, Mapped, declared_attr, mapped_column


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class TenantMixin:
    """Mixin that adds organization_id for multi-tenant isolation.

    IMPORTANT: All tenant-scoped models MUST include this mixin.
    Repositories MUST filter by organization_id automatically.
    """

    @declared_attr
    def organization_id(cls) -> Mapped[UUID]:
        return mapped_column(
            nullable=False,
            index=True,
        )


class IntegerPrimaryKeyMixin:
    """Mixin that adds an autoincrementing integer primary key.

    SQLite only autoincrements INTEGER primary keys, hence the variant.
    """

    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"),
        primary_key=True,
        autoincrement=True,
    )
