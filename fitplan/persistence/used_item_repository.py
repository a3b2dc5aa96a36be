"""Repository for used-item history."""

from __future__ import annotations

from datetime import date

from sqlalchemy import delete, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from fitplan.db.models import UsedItem
from fitplan.persistence.base import store_errors
from fitplan.recommendation.enums import ItemKind
from fitplan.recommendation.errors import PersistenceFailureError
from fitplan.recommendation.models import UsedItemRecord

# Dialects whose INSERT supports ON CONFLICT DO NOTHING
CONFLICT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}
USED_ITEM_KEY = ("user_id", "item_kind", "item_id", "week_number")


class UsedItemRepository:
    """SQLAlchemy-backed UsedItemStore."""

    def __init__(self, session: Session):
        self.session = session

    def has_used(self, user_id: str, item_kind: ItemKind, item_id: int, week_number: int) -> bool:
        query = select(UsedItem.id).where(
            UsedItem.user_id == user_id,
            UsedItem.item_kind == item_kind.value,
            UsedItem.item_id == item_id,
            UsedItem.week_number == week_number,
        )
        with store_errors("has_used"):
            return self.session.execute(query.limit(1)).first() is not None

    def record_used(
        self,
        user_id: str,
        item_kind: ItemKind,
        item_id: int,
        week_number: int,
        date_assigned: date,
    ) -> bool:
        """Insert a usage record unless one exists; returns True when a row was added.

        The insert skips rows that already hold the (user, kind, item, week) key,
        so a concurrent request recording the same item is not an error.
        """
        dialect = self.session.get_bind().dialect.name
        insert = CONFLICT_INSERTS.get(dialect)
        if insert is None:
            raise PersistenceFailureError(f"record_used failed: unsupported database dialect {dialect!r}")

        stmt = (
            insert(UsedItem)
            .values(
                user_id=user_id,
                item_kind=item_kind.value,
                item_id=item_id,
                week_number=week_number,
                date_assigned=date_assigned,
            )
            .on_conflict_do_nothing(index_elements=list(USED_ITEM_KEY))
        )
        with store_errors("record_used"):
            result = self.session.execute(stmt)
        return result.rowcount == 1

    def used_item_ids(self, user_id: str, week_number: int, item_kind: ItemKind) -> set[int]:
        query = select(UsedItem.item_id).where(
            UsedItem.user_id == user_id,
            UsedItem.item_kind == item_kind.value,
            UsedItem.week_number == week_number,
        )
        with store_errors("used_item_ids"):
            return set(self.session.execute(query).scalars().all())

    def history(self, user_id: str) -> list[UsedItemRecord]:
        query = (
            select(UsedItem)
            .where(UsedItem.user_id == user_id)
            .order_by(UsedItem.week_number, UsedItem.item_kind, UsedItem.item_id)
        )
        with store_errors("history"):
            rows = self.session.execute(query).scalars().all()
        return [
            UsedItemRecord(
                user_id=row.user_id,
                item_kind=ItemKind(row.item_kind),
                item_id=row.item_id,
                week_number=row.week_number,
                date_assigned=row.date_assigned,
            )
            for row in rows
        ]

    def purge_before(self, user_id: str, week_number: int) -> int:
        """Delete records for weeks strictly before ``week_number``."""
        stmt = delete(UsedItem).where(UsedItem.user_id == user_id, UsedItem.week_number < week_number)
        with store_errors("purge_used_items"):
            return self.session.execute(stmt).rowcount or 0

    def clear_user(self, user_id: str) -> int:
        with store_errors("clear_used_items"):
            return self.session.execute(delete(UsedItem).where(UsedItem.user_id == user_id)).rowcount or 0
