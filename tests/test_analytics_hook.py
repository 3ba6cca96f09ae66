import asyncio
import pytest
from unittest.mock import AsyncMock, MagicMock

from zerospoil.client.analytics_hook import AnalyticsHook
from zerospoil.client.api_client import AnalyticsApi, ApiClientError

METRICS = {"total_items": 4, "money_saved": 12.5}


@pytest.fixture
def api():
    api = MagicMock(spec=AnalyticsApi)
    api.get_analytics = AsyncMock(return_value=METRICS)
    api.get_waste_logs = AsyncMock(return_value=[{"id": "log-1"}])
    api.create_waste_log = AsyncMock(return_value={"id": "log-2"})
    api.get_waste_reduction = AsyncMock(return_value={"period_days": 7})
    api.get_category_insights = AsyncMock(return_value=[{"category": "dairy"}])
    return api

def test_initial_state_is_loading(api):
    hook = AnalyticsHook(api)

    assert hook.snapshot() == {"analytics": None, "loading": True, "error": None}

def test_one_fetch_per_distinct_period(api):
    hook = AnalyticsHook(api)

    async def render_sequence():
        await hook.use(30)
        await hook.use(30)
        await hook.use(7)
        await hook.use(7)
        await hook.use(30)

    asyncio.run(render_sequence())

    assert [call.args[0] for call in api.get_analytics.await_args_list] == [30, 7, 30]
    assert hook.snapshot() == {"analytics": METRICS, "loading": False, "error": None}

def test_use_without_argument_keeps_period(api):
    hook = AnalyticsHook(api, period=14)

    asyncio.run(hook.use())
    asyncio.run(hook.use())

    api.get_analytics.assert_awaited_once_with(14)

def test_fetch_error_is_captured_as_string(api):
    api.get_analytics.side_effect = ApiClientError("Failed to fetch analytics", status_code=500)
    hook = AnalyticsHook(api)

    asyncio.run(hook.use(30))

    assert hook.error == "Failed to fetch analytics"
    assert hook.loading is False
    assert hook.analytics is None

def test_fetch_error_without_message_uses_default(api):
    api.get_analytics.side_effect = RuntimeError()
    hook = AnalyticsHook(api)

    asyncio.run(hook.use(30))

    assert hook.error == "Failed to fetch analytics"

def test_refetch_clears_previous_error(api):
    api.get_analytics.side_effect = [RuntimeError("offline"), METRICS]
    hook = AnalyticsHook(api)

    asyncio.run(hook.use(30))
    assert hook.error == "offline"

    asyncio.run(hook.refetch())
    assert hook.error is None
    assert hook.analytics == METRICS

def test_create_waste_log_refetches_analytics(api):
    hook = AnalyticsHook(api)
    asyncio.run(hook.use(30))

    new_log = asyncio.run(hook.create_waste_log({"action": "consumed", "date": "2026-10-01"}))

    assert new_log == {"id": "log-2"}
    api.create_waste_log.assert_awaited_once_with({"action": "consumed", "date": "2026-10-01"})
    assert api.get_analytics.await_count == 2

def test_create_waste_log_error_is_raised(api):
    api.create_waste_log.side_effect = ApiClientError("Failed to create waste log", status_code=500)
    hook = AnalyticsHook(api)

    with pytest.raises(ApiClientError, match="Failed to create waste log"):
        asyncio.run(hook.create_waste_log({"action": "wasted", "date": "2026-10-01"}))
    api.get_analytics.assert_not_called()

def test_pass_through_methods(api):
    hook = AnalyticsHook(api)

    assert asyncio.run(hook.get_waste_logs({"action": "wasted"})) == [{"id": "log-1"}]
    assert asyncio.run(hook.get_waste_reduction(7)) == {"period_days": 7}
    assert asyncio.run(hook.get_category_insights()) == [{"category": "dairy"}]
    api.get_waste_logs.assert_awaited_once_with({"action": "wasted"})
    api.get_waste_reduction.assert_awaited_once_with(7)

def test_pass_through_errors_are_raised(api):
    api.get_category_insights.side_effect = ApiClientError("Failed to get category insights", status_code=401)
    hook = AnalyticsHook(api)

    with pytest.raises(ApiClientError):
        asyncio.run(hook.get_category_insights())
