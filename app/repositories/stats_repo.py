"""Repository for the single aggregate stats row.

Counters are adjusted with one ``UPDATE ... SET col = col + delta`` statement
inside the caller's transaction, so concurrent requests never lose an
increment. Decrements are floored at zero in SQL.
"""
from __future__ import annotations

from sqlalchemy import select, update

from app.models.base import utcnow
from app.models.persisted_activity import STATS_ROW_ID, StatsRecord
from app.repositories.base import BaseRepository, floored

COUNTERS = (
    "total_courses",
    "total_enrollments",
    "completed_enrollments",
    "course_views",
)


class StatsRepository(BaseRepository):
    async def ensure_row(self) -> StatsRecord:
        """Return the stats row, creating a zeroed one on first use."""
        result = await self._execute(
            select(StatsRecord)
            .where(StatsRecord.id == STATS_ROW_ID)
            .execution_options(populate_existing=True)
        )
        stats = result.scalar_one_or_none()
        if stats is None:
            stats = StatsRecord(id=STATS_ROW_ID, **{name: 0 for name in COUNTERS})
            self.session.add(stats)
            await self._commit()
            await self.session.refresh(stats)
        return stats

    async def get(self) -> StatsRecord:
        return await self.ensure_row()

    async def adjust(self, **deltas: int) -> None:
        """Apply counter deltas. Does not commit; the caller owns the
        transaction so the adjustment lands together with the mutation
        that caused it."""
        unknown = set(deltas) - set(COUNTERS)
        if unknown:
            raise ValueError(f"Unknown stats counters: {sorted(unknown)}")
        values = {
            name: floored(getattr(StatsRecord, name), delta)
            for name, delta in deltas.items()
            if delta
        }
        if not values:
            return
        values["last_updated"] = utcnow()
        result = await self._execute(
            update(StatsRecord)
            .where(StatsRecord.id == STATS_ROW_ID)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            # Row missing (fresh database without seed); start from zero
            initial = {name: 0 for name in COUNTERS}
            for name, delta in deltas.items():
                initial[name] = max(delta, 0)
            self.session.add(StatsRecord(id=STATS_ROW_ID, **initial))
            await self._flush()
