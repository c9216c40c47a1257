from typing import Any, Iterable, Mapping, Optional

from speaker_api.schemas.vibe_rules import (
    RULE_TYPES,
    VALID_VIBES,
    OverrideRule,
    VibeRule,
    vibe_rule_adapter,
)
from speaker_api.services.time_ranges import intervals_overlap

DAY_NAMES = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]


class RuleValidationError(ValueError):
    code = "invalid_rule"

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field

    def to_dict(self) -> dict:
        return {"error": self.code, "field": self.field, "message": self.message}


class InvalidRange(RuleValidationError):
    code = "invalid_range"


class NoValidVibes(RuleValidationError):
    code = "no_valid_vibes"


class InvalidRuleType(RuleValidationError):
    code = "invalid_rule_type"


class InvalidDays(RuleValidationError):
    code = "invalid_days"


class OverlapConflict(RuleValidationError):
    code = "overlap_conflict"

    def __init__(self, rule: VibeRule, conflicting_rule: VibeRule, shared_days: Optional[list[int]] = None):
        self.rule = rule
        self.conflicting_rule = conflicting_rule
        self.shared_days = shared_days or []

        label = f'"{conflicting_rule.name}"' if conflicting_rule.name else f"#{conflicting_rule.id}"
        message = (
            f"This {rule.rule_type} rule ({rule.start_hour}-{rule.end_hour}) overlaps with "
            f"{conflicting_rule.rule_type} rule {label} "
            f"({conflicting_rule.start_hour}-{conflicting_rule.end_hour})"
        )
        if self.shared_days:
            message += " on " + ", ".join(DAY_NAMES[d] for d in self.shared_days)
        message += ". Please adjust the time range."
        super().__init__(message, field="start_hour")

    def to_dict(self) -> dict:
        out = super().to_dict()
        out["conflict"] = {
            "id": self.conflicting_rule.id,
            "name": self.conflicting_rule.name,
            "rule_type": self.conflicting_rule.rule_type,
            "start_hour": self.conflicting_rule.start_hour,
            "end_hour": self.conflicting_rule.end_hour,
            "shared_days": self.shared_days,
        }
        return out


# ---------- field helpers (shared with the loader) ----------
def is_hour(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and 0 <= value <= 23


def filter_vibes(values: Any) -> list[str]:
    """Canonical vibes only, first occurrence wins, original order kept."""
    if not isinstance(values, (list, tuple)):
        return []
    kept = [v.strip() for v in values if isinstance(v, str)]
    return list(dict.fromkeys(v for v in kept if v in VALID_VIBES))


def filter_days(values: Any) -> list[int]:
    if not isinstance(values, (list, tuple)):
        return []
    return sorted({d for d in values if isinstance(d, int) and not isinstance(d, bool) and 0 <= d <= 6})


# ---------- validation ----------
def check_structure(candidate: Mapping[str, Any]) -> VibeRule:
    """Single-rule checks, in order. Returns the typed, normalized rule."""
    for field in ("start_hour", "end_hour"):
        if not is_hour(candidate.get(field)):
            raise InvalidRange(f"{field} must be an integer between 0 and 23", field=field)

    vibes = filter_vibes(candidate.get("allowed_vibes"))
    if not vibes:
        raise NoValidVibes(
            f"allowed_vibes must contain at least one of: {', '.join(VALID_VIBES)}",
            field="allowed_vibes",
        )

    rule_type = candidate.get("rule_type")
    if rule_type not in RULE_TYPES:
        raise InvalidRuleType('rule_type must be either "base" or "override"', field="rule_type")

    raw_days = candidate.get("days")
    days = None
    if rule_type == "override":
        days = filter_days(raw_days)
        if not days:
            raise InvalidDays(
                "Override rules must specify at least one day between 0 (Sunday) and 6 (Saturday)",
                field="days",
            )
    elif raw_days is not None:
        raise InvalidDays("Base schedule rules cannot specify days", field="days")

    return vibe_rule_adapter.validate_python(
        {
            "id": candidate.get("id"),
            "household_name": candidate.get("household_name"),
            "name": candidate.get("name"),
            "start_hour": candidate["start_hour"],
            "end_hour": candidate["end_hour"],
            "allowed_vibes": vibes,
            "rule_type": rule_type,
            "days": days,
        }
    )


def find_overlap(rule: VibeRule, existing_rules: Iterable[VibeRule]) -> Optional[tuple[VibeRule, list[int]]]:
    for other in existing_rules:
        if rule.id is not None and other.id == rule.id:
            continue
        if other.rule_type != rule.rule_type:
            continue
        if rule.household_name and other.household_name and other.household_name != rule.household_name:
            continue

        shared: list[int] = []
        if isinstance(rule, OverrideRule):
            shared = sorted(set(rule.days) & set(other.days or []))
            if not shared:
                continue

        if intervals_overlap(rule.start_hour, rule.end_hour, other.start_hour, other.end_hour):
            return other, shared
    return None


def validate_rule(candidate: Mapping[str, Any], existing_rules: Iterable[VibeRule]) -> VibeRule:
    """
    Validate a rule about to be written.

    ``existing_rules`` should be the current rules of the same household; the
    candidate's own id (when updating) is skipped. Raises a
    ``RuleValidationError`` subclass on the first failing check.
    """
    rule = check_structure(candidate)

    hit = find_overlap(rule, existing_rules)
    if hit:
        other, shared = hit
        raise OverlapConflict(rule, other, shared)
    return rule
