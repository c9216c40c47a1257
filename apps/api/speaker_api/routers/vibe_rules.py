from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from speaker_api.core.database import get_db
from speaker_api.schemas.vibe_rules import VALID_VIBES, RuleUpsert, VibeRule
from speaker_api.services.rule_loader import load_rules
from speaker_api.services.rule_repository import RepositoryUnavailable, RuleNotFound, SqlRuleRepository
from speaker_api.services.rule_store import InvalidRuleId, delete_rule, save_rule
from speaker_api.services.validators import OverlapConflict, RuleValidationError

router = APIRouter()


def get_rule_repository(db: Session = Depends(get_db)) -> SqlRuleRepository:
    return SqlRuleRepository(db)


def _http_error(e: Exception) -> HTTPException:
    if isinstance(e, OverlapConflict):
        return HTTPException(status_code=409, detail=e.to_dict())
    if isinstance(e, RuleValidationError):
        return HTTPException(status_code=400, detail=e.to_dict())
    if isinstance(e, InvalidRuleId):
        return HTTPException(status_code=400, detail={"error": "invalid_rule_id", "message": str(e)})
    if isinstance(e, RuleNotFound):
        return HTTPException(status_code=404, detail="Vibe time rule not found")
    return HTTPException(status_code=503, detail=f"Rule storage unavailable: {e}")


@router.get("/vibes")
def list_valid_vibes():
    return {"vibes": list(VALID_VIBES)}


@router.get("", response_model=list[VibeRule])
def list_rules(
    household_name: str = Query(min_length=1),
    repo: SqlRuleRepository = Depends(get_rule_repository),
):
    """Rules for a household, cleaned up and ordered by start_hour."""
    return load_rules(repo, household_name.strip())


@router.post("", response_model=VibeRule, status_code=201)
def create_rule(payload: RuleUpsert, repo: SqlRuleRepository = Depends(get_rule_repository)):
    try:
        return save_rule(repo, payload)
    except (RuleValidationError, RepositoryUnavailable) as e:
        raise _http_error(e)


@router.put("/{rule_id}", response_model=VibeRule)
def update_rule(rule_id: int, payload: RuleUpsert, repo: SqlRuleRepository = Depends(get_rule_repository)):
    try:
        return save_rule(repo, payload, rule_id=rule_id)
    except (RuleValidationError, InvalidRuleId, RuleNotFound, RepositoryUnavailable) as e:
        raise _http_error(e)


@router.delete("/{rule_id}")
def remove_rule(
    rule_id: int,
    household_name: str = Query(min_length=1),
    repo: SqlRuleRepository = Depends(get_rule_repository),
):
    try:
        delete_rule(repo, rule_id, household_name.strip())
    except (InvalidRuleId, RuleNotFound, RepositoryUnavailable) as e:
        raise _http_error(e)
    return {"status": "ok", "id": rule_id}
