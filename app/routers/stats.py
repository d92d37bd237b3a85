"""Aggregate platform statistics."""
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.config import get_session
from app.models.messaging import StatsOut
from app.repositories.stats_repo import StatsRepository

router = APIRouter(tags=["Stats"])


@router.get("/stats", response_model=StatsOut)
async def get_stats(session: AsyncSession = Depends(get_session)):
    stats = await StatsRepository(session).get()
    return stats.to_dict()
