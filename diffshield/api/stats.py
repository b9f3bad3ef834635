"""
GET /stats
Usage counters (installations, reviewed PRs, repositories) read from the
injected UsageStatsRepository.
"""
from fastapi import APIRouter

from diffshield.services.stats_repository import UsageStatsRepository


def build_stats_router(stats: UsageStatsRepository) -> APIRouter:
    router = APIRouter(tags=["Stats"])

    @router.get("/stats")
    async def get_stats():
        return stats.snapshot()

    return router
