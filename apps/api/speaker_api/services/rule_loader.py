import logging
from typing import Any, Iterable, Mapping, Optional

from pydantic import ValidationError

from speaker_api.schemas.vibe_rules import RULE_TYPES, VibeRule, vibe_rule_adapter
from speaker_api.services.rule_repository import RepositoryUnavailable
from speaker_api.services.validators import filter_days, filter_vibes, is_hour

logger = logging.getLogger(__name__)


def _clean_str(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    return value.strip() or None


def sanitize_row(row: Mapping[str, Any]) -> Optional[VibeRule]:
    """
    Turn one raw repository row into a typed rule, or None if it is unusable.

    A missing/unknown rule_type falls back to "base" (rows written before
    overrides existed) and is logged as a warning.
    """
    rule_id = row.get("id")
    if not isinstance(rule_id, int) or isinstance(rule_id, bool):
        logger.debug("Dropping vibe time rule without integer id: %r", rule_id)
        return None

    if not (is_hour(row.get("start_hour")) and is_hour(row.get("end_hour"))):
        logger.debug("Dropping vibe time rule %s: hours out of range", rule_id)
        return None

    vibes = filter_vibes(row.get("allowed_vibes"))
    if not vibes:
        logger.debug("Dropping vibe time rule %s: no valid vibes", rule_id)
        return None

    rule_type = _clean_str(row.get("rule_type"))
    if rule_type not in RULE_TYPES:
        logger.warning(
            "Vibe time rule %s has rule_type %r; treating it as a base rule",
            rule_id,
            row.get("rule_type"),
        )
        rule_type = "base"

    days = None
    if rule_type == "override":
        days = filter_days(row.get("days"))
        if not days:
            logger.debug("Dropping override rule %s: no valid days", rule_id)
            return None
    elif row.get("days") is not None:
        logger.debug("Dropping base rule %s: base rules cannot carry days", rule_id)
        return None

    try:
        return vibe_rule_adapter.validate_python(
            {
                "id": rule_id,
                "household_name": _clean_str(row.get("household_name")),
                "name": _clean_str(row.get("name")),
                "start_hour": row["start_hour"],
                "end_hour": row["end_hour"],
                "allowed_vibes": vibes,
                "rule_type": rule_type,
                "days": days,
                "created_at": row.get("created_at"),
                "updated_at": row.get("updated_at"),
            }
        )
    except ValidationError as e:
        logger.debug("Dropping vibe time rule %s: %s", rule_id, e)
        return None


def sanitize_rows(rows: Iterable[Mapping[str, Any]]) -> list[VibeRule]:
    rules = [r for r in (sanitize_row(row) for row in rows or []) if r is not None]
    # sorted() is stable, so ties keep the repository order
    return sorted(rules, key=lambda r: r.start_hour)


def load_rules(repository, household_name: Optional[str] = None) -> list[VibeRule]:
    """
    Read path for the recommender: never raises on repository failure.

    An unavailable repository is logged and treated as "no rules", which
    makes the recommendation come back empty instead of failing the request.
    """
    try:
        rows = repository.list(household_name)
    except RepositoryUnavailable as e:
        logger.error("Error loading vibe time rules for %r: %s", household_name, e)
        return []
    return sanitize_rows(rows)
