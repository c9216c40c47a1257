from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Callable, Optional, Sequence

from speaker_api.schemas.recommendations import FavoriteItem, Recommendation
from speaker_api.schemas.vibe_rules import VALID_VIBES, VibeRule
from speaker_api.services.time_ranges import contains_hour


@dataclass(frozen=True)
class TimeContext:
    hour: int
    day: int  # 0=Sun ... 6=Sat
    on_date: date


def _js_weekday(d: datetime) -> int:
    # Python: Mon=0..Sun=6 -> rules: Sun=0..Sat=6
    return (d.weekday() + 1) % 7


def resolve_time_context(
    hour: Optional[int] = None,
    day: Optional[int] = None,
    timezone_offset_hours: Optional[float] = None,
    now: Optional[datetime] = None,
) -> TimeContext:
    """
    Caller-supplied hour/day win. Whatever is missing comes from the caller's
    clock (UTC + offset) when an offset is given, else from server local time.
    The seed date follows the same clock.
    """
    if timezone_offset_hours is not None:
        utc_now = now.astimezone(timezone.utc) if now else datetime.now(timezone.utc)
        clock = utc_now + timedelta(hours=timezone_offset_hours)
    else:
        clock = now or datetime.now()

    return TimeContext(
        hour=clock.hour if hour is None else hour,
        day=_js_weekday(clock) if day is None else day,
        on_date=clock.date(),
    )


def seed_from_string(value: str) -> int:
    """h = h*31 + ord(c) in signed 32-bit arithmetic, absolute value."""
    h = 0
    for ch in value:
        h = (h * 31 + ord(ch)) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return abs(h)


def selection_seed(active_rules: Sequence[VibeRule], on_date: date) -> int:
    ids = ",".join(str(i) for i in sorted(r.id for r in active_rules if r.id is not None))
    return seed_from_string(f"{ids}-{on_date.isoformat()}")


def active_rules_for(hour: int, day: int, rules: Sequence[VibeRule]) -> tuple[list[VibeRule], dict]:
    base_rules = [r for r in rules if r.rule_type == "base"]
    override_rules = [r for r in rules if r.rule_type == "override"]

    matching_base = [r for r in base_rules if contains_hour(r.start_hour, r.end_hour, hour)]
    matching_override = [
        r for r in override_rules if day in r.days and contains_hour(r.start_hour, r.end_hour, hour)
    ]

    # an override replaces the base schedule for this hour; the two are never merged
    active = matching_override if matching_override else matching_base

    counts = {
        "total_rules": len(rules),
        "base_rules": len(base_rules),
        "override_rules": len(override_rules),
        "matching_base": len(matching_base),
        "matching_override": len(matching_override),
        "active_rules": len(active),
    }
    return active, counts


def recommend(
    current_hour: int,
    current_day: int,
    rules: Sequence[VibeRule],
    candidate_items: Sequence[FavoriteItem],
    vibe_of: Callable[[str], Optional[str]],
    on_date: Optional[date] = None,
) -> Recommendation:
    on_date = on_date or date.today()
    active, counts = active_rules_for(current_hour, current_day, rules)

    allowed = {v for r in active for v in r.allowed_vibes}
    allowed_vibes = [v for v in VALID_VIBES if v in allowed]

    debug = {
        "hour": current_hour,
        "day": current_day,
        "date": on_date.isoformat(),
        **counts,
        "active_rule_ids": [r.id for r in active],
        "active_rule_types": [r.rule_type for r in active],
        "candidate_items": len(candidate_items),
    }

    if not allowed_vibes:
        debug["matching_items"] = 0
        return Recommendation(debug=debug)

    filtered = [item for item in candidate_items if vibe_of(item.id) in allowed]
    debug["matching_items"] = len(filtered)
    current_rule = active[0] if active else None

    if not filtered:
        return Recommendation(current_rule=current_rule, allowed_vibes=allowed_vibes, debug=debug)

    # same active rules + same date -> same pick
    seed = selection_seed(active, on_date)
    index = seed % len(filtered)
    debug["seed"] = seed
    debug["primary_index"] = index

    return Recommendation(
        primary=filtered[index],
        alternatives=[item for i, item in enumerate(filtered) if i != index],
        current_rule=current_rule,
        allowed_vibes=allowed_vibes,
        debug=debug,
    )
