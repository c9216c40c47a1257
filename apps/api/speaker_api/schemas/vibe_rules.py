from datetime import datetime
from typing import Annotated, Any, Literal, Optional, Union, get_args

from pydantic import BaseModel, Field, TypeAdapter, field_validator

Vibe = Literal["Down", "Down/Mid", "Mid"]
VALID_VIBES: tuple[str, ...] = get_args(Vibe)

RuleType = Literal["base", "override"]
RULE_TYPES: tuple[str, ...] = get_args(RuleType)


class RuleUpsert(BaseModel):
    """Incoming rule payload.

    Hours, vibes and days are left untyped here; ``services.validators``
    checks them and reports the offending field.
    """
    household_name: str = Field(min_length=1)
    name: Optional[str] = None
    start_hour: Any = None
    end_hour: Any = None
    allowed_vibes: list[Any] = Field(default_factory=list)
    rule_type: Optional[str] = None
    days: Optional[list[Any]] = None


class _RuleFields(BaseModel):
    id: Optional[int] = None
    household_name: Optional[str] = None
    name: Optional[str] = None
    start_hour: int = Field(ge=0, le=23)
    end_hour: int = Field(ge=0, le=23)
    allowed_vibes: list[Vibe] = Field(min_length=1)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class BaseRule(_RuleFields):
    rule_type: Literal["base"] = "base"
    days: None = None


class OverrideRule(_RuleFields):
    rule_type: Literal["override"] = "override"
    days: list[int] = Field(min_length=1)

    @field_validator("days")
    @classmethod
    def _canonical_days(cls, v: list[int]) -> list[int]:
        if any(d < 0 or d > 6 for d in v):
            raise ValueError("days must be between 0 (Sunday) and 6 (Saturday)")
        return sorted(set(v))


VibeRule = Annotated[Union[BaseRule, OverrideRule], Field(discriminator="rule_type")]

vibe_rule_adapter = TypeAdapter(VibeRule)
