"""
Analytics data holder for dashboard views.

Keeps `analytics`, `loading` and `error` for one view and refetches when the
view switches to a different reporting period.
"""

import logging
from typing import Any, Dict, List, Optional

from zerospoil.client.api_client import AnalyticsApi

logger = logging.getLogger(__name__)

DEFAULT_ERROR = "Failed to fetch analytics"


class AnalyticsHook:
    """
    Fetch-on-change wrapper around `AnalyticsApi`.

    Call `use(period)` whenever the view renders; a fetch happens only when
    `period` differs from the last one seen. Overlapping fetches are not
    coordinated: whichever finishes last wins.
    """

    def __init__(self, api: AnalyticsApi, period: int = 30):
        self.api = api
        self.period = period
        self.analytics: Optional[Dict[str, Any]] = None
        self.loading = True
        self.error: Optional[str] = None
        self._fetched_period: Optional[int] = None

    async def use(self, period: Optional[int] = None) -> 'AnalyticsHook':
        if period is not None:
            self.period = period
        if self._fetched_period != self.period:
            self._fetched_period = self.period
            await self.refetch()
        return self

    async def refetch(self) -> None:
        period = self.period
        self.loading = True
        self.error = None
        try:
            self.analytics = await self.api.get_analytics(period)
        except Exception as e:
            logger.error(f"Error fetching analytics for period {period}: {e}")
            self.error = str(e) or DEFAULT_ERROR
        finally:
            self.loading = False

    async def get_waste_logs(self, filters: Optional[Dict[str, Optional[str]]] = None) -> List[Dict[str, Any]]:
        return await self.api.get_waste_logs(filters)

    async def create_waste_log(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Create a waste log, then refresh the metrics it affects."""
        new_log = await self.api.create_waste_log(data)
        await self.refetch()
        return new_log

    async def get_waste_reduction(self, period_days: int = 30) -> Dict[str, Any]:
        return await self.api.get_waste_reduction(period_days)

    async def get_category_insights(self) -> List[Dict[str, Any]]:
        return await self.api.get_category_insights()

    def snapshot(self) -> Dict[str, Any]:
        return {"analytics": self.analytics, "loading": self.loading, "error": self.error}
