import logging
from typing import Any, Mapping, Optional, Union

from pydantic import BaseModel

from speaker_api.schemas.vibe_rules import VibeRule, vibe_rule_adapter
from speaker_api.services.rule_loader import sanitize_rows
from speaker_api.services.validators import RuleValidationError, validate_rule

logger = logging.getLogger(__name__)


class InvalidRuleId(ValueError):
    pass


def _require_rule_id(rule_id: Any) -> int:
    if not isinstance(rule_id, int) or isinstance(rule_id, bool) or rule_id <= 0:
        raise InvalidRuleId(f"Invalid rule ID: {rule_id!r}")
    return rule_id


def normalize_payload(payload: Mapping[str, Any], household_name: str, rule_id: Optional[int] = None) -> dict:
    name = payload.get("name")
    name = name.strip() if isinstance(name, str) else None

    rule_type = payload.get("rule_type")
    if isinstance(rule_type, str):
        rule_type = rule_type.strip()

    return {
        "id": rule_id,
        "household_name": household_name,
        "name": name or None,
        "start_hour": payload.get("start_hour"),
        "end_hour": payload.get("end_hour"),
        "allowed_vibes": payload.get("allowed_vibes"),
        "rule_type": rule_type or "base",
        "days": payload.get("days"),
    }


def save_rule(
    repository,
    payload: Union[Mapping[str, Any], BaseModel],
    household_name: Optional[str] = None,
    rule_id: Optional[int] = None,
) -> VibeRule:
    """
    Validate and persist a rule; insert when ``rule_id`` is None, else update.

    Siblings are re-read from the repository inside the household lock right
    before validation. Validation errors and repository errors propagate.
    """
    data = payload.model_dump() if isinstance(payload, BaseModel) else dict(payload)

    household = (household_name or data.get("household_name") or "").strip()
    if not household:
        raise RuleValidationError("household_name is required", field="household_name")
    if rule_id is not None:
        _require_rule_id(rule_id)

    candidate = normalize_payload(data, household, rule_id)

    with repository.lock_scope(household):
        siblings = sanitize_rows(repository.list(household))
        rule = validate_rule(candidate, siblings)

        row = rule.model_dump(include={"household_name", "name", "start_hour", "end_hour", "allowed_vibes", "days", "rule_type"})
        if rule_id is None:
            saved = repository.insert(row)
            logger.info("Created %s vibe time rule %s for %r", rule.rule_type, saved.get("id"), household)
        else:
            saved = repository.update(rule_id, row)
            logger.info("Updated %s vibe time rule %s for %r", rule.rule_type, rule_id, household)

    return vibe_rule_adapter.validate_python(saved)


def delete_rule(repository, rule_id: Any, household_name: Optional[str] = None) -> None:
    rule_id = _require_rule_id(rule_id)
    repository.delete(rule_id, household_name)
    logger.info("Deleted vibe time rule %s for %r", rule_id, household_name)
