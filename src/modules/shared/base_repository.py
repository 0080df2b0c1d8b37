"""
Generic async repository over one SQLModel table.

Repositories only read and stage rows inside a session they are handed;
commit and rollback belong to `DatabaseService.get_transaction()`, and
mapping rows to domain models belongs to the game store.

    creatures = BaseRepository(CreatureRecord, logger)
    rows = await creatures.find_many_where(session, CreatureRecord.owner_id == player_id)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Generic, List, Optional, Type, TypeVar

from sqlalchemy import func, select

if TYPE_CHECKING:
    from logging import Logger

    from sqlalchemy import ColumnElement
    from sqlalchemy.ext.asyncio import AsyncSession

T = TypeVar("T")


class BaseRepository(Generic[T]):
    """Typed lookups, filtered scans and counts for `model_class`."""

    def __init__(self, model_class: Type[T], logger: Logger) -> None:
        self.model_class = model_class
        self.log = logger

    def _trace(self, operation: str, **fields: Any) -> None:
        model = self.model_class.__name__
        self.log.debug(f"{model}.{operation}", extra={"model": model, **fields})

    async def get(
        self,
        session: AsyncSession,
        id_value: Any,
        for_update: bool = False,
    ) -> Optional[T]:
        """Row by primary key, or None. `for_update` takes a row lock."""
        stmt = select(self.model_class).where(
            self.model_class.id == id_value  # type: ignore[attr-defined]
        )
        if for_update:
            stmt = stmt.with_for_update()

        instance = (await session.execute(stmt)).scalar_one_or_none()
        self._trace("get", id=id_value, found=instance is not None, locked=for_update)
        return instance

    async def find_many_where(
        self,
        session: AsyncSession,
        *conditions: ColumnElement[bool],
        for_update: bool = False,
        order_by: Optional[Any] = None,
    ) -> List[T]:
        stmt = select(self.model_class).where(*conditions)
        if for_update:
            stmt = stmt.with_for_update()
        if order_by is not None:
            stmt = stmt.order_by(order_by)

        instances = list((await session.execute(stmt)).scalars().all())
        self._trace("find_many_where", found_count=len(instances), locked=for_update)
        return instances

    async def count(self, session: AsyncSession, *conditions: ColumnElement[bool]) -> int:
        stmt = select(func.count()).select_from(self.model_class).where(*conditions)
        total = (await session.execute(stmt)).scalar_one()
        self._trace("count", count=total)
        return total

    def add(self, session: AsyncSession, instance: T) -> T:
        session.add(instance)
        self._trace("add")
        return instance

    async def flush(self, session: AsyncSession) -> None:
        await session.flush()
        self._trace("flush")
