"""
ダッシュボードの派生データ（絞り込み・並び替え・集計）。

どれも元の plants リストを変更しない純粋関数。
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from enum import Enum
from typing import Dict, List, Optional, Sequence

from schemas.plant import LIGHT_LEVELS, Plant
from services.schedule import needs_water, next_due_date

WEEKDAY_KEYS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
ALL = "all"


class CategoryFilter(str, Enum):
    ALL = "all"
    NEEDS_WATER = "needs-water"
    HEALTHY = "healthy"
    NEEDS_ATTENTION = "needs-attention"


class SortOrder(str, Enum):
    NAME_ASC = "name-asc"
    NAME_DESC = "name-desc"
    NEXT_WATERING = "next-watering"


@dataclass
class PlantQuery:
    category: CategoryFilter = CategoryFilter.ALL
    search: str = ""
    location: str = ALL
    light: str = ALL
    sort_by: SortOrder = SortOrder.NAME_ASC


@dataclass
class DashboardSummary:
    """上部のカード（合計 / 水やり / 元気 / 要注意）"""
    total: int
    needs_water: int
    healthy: int
    needs_attention: int


@dataclass
class UpcomingDay:
    day: date
    label: str
    count: int


@dataclass
class PlantStatistics:
    health: Dict[str, int]
    by_location: Dict[str, int]
    by_light: Dict[str, int]
    upcoming: List[UpcomingDay] = field(default_factory=list)


# -------------------------
# utils
# -------------------------
def _today(today: Optional[date]) -> date:
    if today is None:
        return datetime.now(timezone.utc).date()
    if isinstance(today, datetime):
        return today.astimezone(timezone.utc).date() if today.tzinfo else today.date()
    return today


def _next_watering(plant: Plant) -> Optional[datetime]:
    return next_due_date(plant.last_watered, plant.watering_frequency)


def _due_day(last, frequency) -> Optional[date]:
    nxt = next_due_date(last, frequency)
    return nxt.date() if nxt is not None else None


# -------------------------
# filter
# -------------------------
def matches_category(plant: Plant, category: CategoryFilter, today: date) -> bool:
    if category == CategoryFilter.NEEDS_WATER:
        return needs_water(plant, today)
    if category == CategoryFilter.HEALTHY:
        return plant.health == "healthy"
    if category == CategoryFilter.NEEDS_ATTENTION:
        return plant.health == "attention"
    return True


def matches_search(plant: Plant, term: str) -> bool:
    if not term:
        return True
    needle = term.lower()
    return needle in plant.name.lower() or needle in (plant.scientific_name or "").lower()


def matches_location(plant: Plant, location: str) -> bool:
    return location == ALL or plant.location == location


def matches_light(plant: Plant, light: str) -> bool:
    return light == ALL or plant.light == light


def sort_plants(plants: Sequence[Plant], sort_by: SortOrder) -> List[Plant]:
    """安定ソート（同順位は元の並びのまま）。次回水やりが不明なものは先頭"""
    if sort_by == SortOrder.NAME_ASC:
        return sorted(plants, key=lambda p: (p.name.casefold(), p.name))
    if sort_by == SortOrder.NAME_DESC:
        return sorted(plants, key=lambda p: (p.name.casefold(), p.name), reverse=True)
    if sort_by == SortOrder.NEXT_WATERING:
        def key(p):
            nxt = _next_watering(p)
            return (0, 0.0) if nxt is None else (1, nxt.timestamp())
        return sorted(plants, key=key)
    return list(plants)


def visible_plants(plants: Sequence[Plant], query: PlantQuery, today: Optional[date] = None) -> List[Plant]:
    day = _today(today)
    category = CategoryFilter(query.category)
    filtered = [
        p for p in plants
        if matches_category(p, category, day)
        and matches_search(p, query.search)
        and matches_location(p, query.location)
        and matches_light(p, query.light)
    ]
    return sort_plants(filtered, SortOrder(query.sort_by))


def location_options(plants: Sequence[Plant]) -> List[str]:
    return [ALL] + list(dict.fromkeys(p.location for p in plants))


def light_options(plants: Sequence[Plant]) -> List[str]:
    return [ALL] + list(dict.fromkeys(p.light for p in plants))


# -------------------------
# stats
# -------------------------
def summarize(plants: Sequence[Plant], today: Optional[date] = None) -> DashboardSummary:
    day = _today(today)
    return DashboardSummary(
        total=len(plants),
        needs_water=sum(1 for p in plants if needs_water(p, day)),
        healthy=sum(1 for p in plants if p.health == "healthy"),
        needs_attention=sum(1 for p in plants if p.health == "attention"),
    )


def upcoming_tasks(plants: Sequence[Plant], today: Optional[date] = None, days: int = 7) -> List[UpcomingDay]:
    """
    今日から days 日分、水やり/肥料の予定日がちょうどその日になる件数。
    期限切れのものは過去に遡って数えない。
    """
    day0 = _today(today)
    window = [day0 + timedelta(days=i) for i in range(days)]
    counts = {d: 0 for d in window}

    for p in plants:
        for due in (
            _due_day(p.last_watered, p.watering_frequency),
            _due_day(p.last_fertilized, p.fertilizing_frequency),
        ):
            if due in counts:
                counts[due] += 1

    return [UpcomingDay(day=d, label=WEEKDAY_KEYS[d.weekday()], count=counts[d]) for d in window]


def statistics(plants: Sequence[Plant], today: Optional[date] = None) -> PlantStatistics:
    by_location: Dict[str, int] = {}
    for p in plants:
        by_location[p.location] = by_location.get(p.location, 0) + 1

    return PlantStatistics(
        health={
            "healthy": sum(1 for p in plants if p.health == "healthy"),
            "attention": sum(1 for p in plants if p.health == "attention"),
        },
        by_location=by_location,
        by_light={level: sum(1 for p in plants if p.light == level) for level in LIGHT_LEVELS},
        upcoming=upcoming_tasks(plants, today),
    )
