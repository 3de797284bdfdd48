from __future__ import annotations

import re
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, Optional, Union

from schemas.base import to_aware_utc as _to_aware_utc
from schemas.plant import LIGHT_LEVELS

DEFAULT_LIGHT = "Medium"

# cycle 名 -> (頻度フィールド, 最終実施フィールド)
CYCLES = {
    "water": ("watering_frequency", "last_watered"),
    "fertilize": ("fertilizing_frequency", "last_fertilized"),
    "groom": ("grooming_frequency", "last_groomed"),
}

DateLike = Union[date, datetime, str, None]


# -------------------------
# datetime helpers
# -------------------------
def parse_timestamp(value: Any) -> Optional[datetime]:
    """datetime / ISO 文字列（Z付き含む）を受け付ける。読めなければ None"""
    if isinstance(value, datetime):
        return _to_aware_utc(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if isinstance(value, str) and value:
        s = value.strip()
        if s.endswith("Z"):
            s = s[:-1] + "+00:00"
        try:
            return _to_aware_utc(datetime.fromisoformat(s))
        except ValueError:
            return None
    return None


def _as_day(today: DateLike) -> date:
    if today is None:
        return datetime.now(timezone.utc).date()
    if isinstance(today, datetime):
        return _to_aware_utc(today).date()
    if isinstance(today, date):
        return today
    parsed = parse_timestamp(today)
    if parsed is None:
        raise ValueError(f"invalid date: {today!r}")
    return parsed.date()


# -------------------------
# schedule
# -------------------------
def next_due_date(last_performed: Any, frequency_days: Any) -> Optional[datetime]:
    """最終実施 + 頻度（日）。クランプはしない。読めない値は None"""
    last = parse_timestamp(last_performed)
    if last is None or isinstance(frequency_days, bool):
        return None
    try:
        days = int(frequency_days)
    except (TypeError, ValueError, OverflowError):
        return None
    try:
        return last + timedelta(days=days)
    except OverflowError:
        return None


def is_due(last_performed: Any, frequency_days: Any, today: DateLike = None) -> bool:
    """
    次回予定日 <= 今日 なら True（日単位で比較、時刻は無視）
    日時が不明な場合は常に due 扱い
    """
    nxt = next_due_date(last_performed, frequency_days)
    if nxt is None:
        return True
    return nxt.date() <= _as_day(today)


def cycle_statuses(plant, today: DateLike = None) -> Dict[str, Dict[str, Any]]:
    """water / fertilize / groom それぞれの次回予定日と due フラグ"""
    day = _as_day(today)
    result = {}
    for cycle, (freq_field, last_field) in CYCLES.items():
        last = getattr(plant, last_field, None)
        freq = getattr(plant, freq_field, None)
        result[cycle] = {
            "next_due": next_due_date(last, freq),
            "due": is_due(last, freq, day),
        }
    return result


def needs_water(plant, today: DateLike = None) -> bool:
    return is_due(plant.last_watered, plant.watering_frequency, today)


# -------------------------
# light
# -------------------------
def derive_light(sunlight: Optional[str]) -> str:
    """
    "Bright, indirect light" -> "Bright"
    先頭の単語（空白/カンマまで）がカテゴリに無ければ Medium
    """
    if not sunlight:
        return DEFAULT_LIGHT
    token = re.split(r"[ ,]", sunlight.strip(), maxsplit=1)[0]
    token = token.capitalize()
    return token if token in LIGHT_LEVELS else DEFAULT_LIGHT
