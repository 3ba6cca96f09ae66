"""
Dashboard metrics derived from a user's food items, waste logs and donations.

All functions are pure: callers fetch the rows from Firestore and pass them
in together with the reference day.
"""

import datetime
import math
from collections import Counter
from typing import Any, Dict, Iterable, List, Optional

from zerospoil.models.schemas import SAVED_ACTIONS, WasteAction

# kg of CO2 per kg of food kept out of landfill, and kg per logged item
CO2_PER_KG = 2.5
KG_PER_ITEM = 0.5
MEALS_PER_SAVED_ITEM = 1.2
TREND_DAYS = 7

FOOD_STATUSES = ("fresh", "expiring_soon", "expired")


def period_start(period: int, today: Optional[datetime.date] = None) -> str:
    """ISO date `period` days before `today`."""
    today = today or datetime.date.today()
    return (today - datetime.timedelta(days=period)).isoformat()


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _percentage(count: int, total: int) -> int:
    return _round_half_up(count / total * 100) if total > 0 else 0


def _is_saved(log: Dict[str, Any]) -> bool:
    return log.get("action") in SAVED_ACTIONS


def _is_wasted(log: Dict[str, Any]) -> bool:
    return log.get("action") == WasteAction.WASTED.value


def waste_trend(waste_logs: List[Dict[str, Any]], today: datetime.date, days: int = TREND_DAYS) -> List[Dict[str, Any]]:
    """Per-day wasted/saved/donated counts for the last `days` days, oldest first."""
    trend = []
    for offset in range(days - 1, -1, -1):
        day = (today - datetime.timedelta(days=offset)).isoformat()
        day_logs = [log for log in waste_logs if log.get("date") == day]
        trend.append({
            "date": day,
            "wasted": sum(1 for log in day_logs if _is_wasted(log)),
            "saved": sum(1 for log in day_logs if _is_saved(log)),
            "donated": sum(1 for log in day_logs if log.get("action") == WasteAction.DONATED.value),
        })
    return trend


def _distribution(values: Iterable[Any], key: str) -> List[Dict[str, Any]]:
    counts = Counter(values)
    total = sum(counts.values())
    return [
        {key: value, "count": count, "percentage": _percentage(count, total)}
        for value, count in counts.items()
    ]


def compute_analytics(food_items: List[Dict[str, Any]], waste_logs: List[Dict[str, Any]],
                      donations: List[Dict[str, Any]], today: Optional[datetime.date] = None) -> Dict[str, Any]:
    """
    Build the dashboard metrics.

    `waste_logs` should already be limited to the requested period and
    `donations` to completed ones.
    """
    today = today or datetime.date.today()

    saved = [log for log in waste_logs if _is_saved(log)]
    money_saved = sum(log.get("estimated_value") or 0 for log in saved)
    quantity_saved = sum(log.get("quantity") or 1 for log in saved)
    co2_saved = quantity_saved * KG_PER_ITEM * CO2_PER_KG

    return {
        "total_items": len(food_items),
        "expiring_soon": sum(1 for item in food_items if item.get("status") == "expiring_soon"),
        "expired": sum(1 for item in food_items if item.get("status") == "expired"),
        "money_saved": round(money_saved, 2),
        "waste_prevented": len(saved),
        "co2_saved": round(co2_saved, 2),
        "meals_preserved": _round_half_up(len(saved) * MEALS_PER_SAVED_ITEM),
        "donation_count": len(donations),
        "waste_trend": waste_trend(waste_logs, today),
        "category_breakdown": _distribution((item.get("category") for item in food_items), "category"),
        "action_distribution": _distribution((log.get("action") for log in waste_logs), "action"),
    }


def compute_waste_reduction(waste_logs: List[Dict[str, Any]], period_days: int = 30) -> Dict[str, Any]:
    """Share of logged quantity that was saved rather than wasted."""
    total_wasted = sum(log.get("quantity") or 1 for log in waste_logs if _is_wasted(log))
    saved = [log for log in waste_logs if _is_saved(log)]
    total_saved = sum(log.get("quantity") or 1 for log in saved)
    money_saved = sum(log.get("estimated_value") or 0 for log in saved)

    return {
        "total_wasted": total_wasted,
        "total_saved": total_saved,
        "waste_reduction_percentage": _percentage(total_saved, total_wasted + total_saved),
        "money_saved": money_saved,
        "period_days": period_days,
    }


def compute_category_insights(food_items: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Status counts and waste risk per food category."""
    stats: Dict[str, Dict[str, Any]] = {}
    for item in food_items:
        category = stats.setdefault(item.get("category"), {
            "total": 0, "fresh": 0, "expiring_soon": 0, "expired": 0, "total_quantity": 0,
        })
        category["total"] += 1
        status = item.get("status")
        if status in FOOD_STATUSES:
            category[status] += 1
        category["total_quantity"] += item.get("quantity") or 1

    return [
        {
            "category": name,
            **counts,
            "waste_risk": _percentage(counts["expiring_soon"] + counts["expired"], counts["total"]),
        }
        for name, counts in stats.items()
    ]
