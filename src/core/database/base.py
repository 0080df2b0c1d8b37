"""
ORM metadata and shared column mixins.

Every Brood table is a `SQLModel` with `table=True`, so all of them register
on `SQLModel.metadata`. Mixin columns use `sa_type` rather than a shared
`sa_column`, since a Column object can belong to only one table.

Schema helpers only; models live under `src/database/models/`.
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


metadata = SQLModel.metadata


class TimestampMixin(SQLModel):
    """created_at / updated_at audit columns."""

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_type=DateTime(timezone=True),
        nullable=False,
    )
    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_type=DateTime(timezone=True),
        sa_column_kwargs={"onupdate": utc_now},
        nullable=False,
    )


__all__ = ["SQLModel", "TimestampMixin", "metadata", "utc_now"]
