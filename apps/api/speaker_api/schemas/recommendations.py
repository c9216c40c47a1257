from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from speaker_api.schemas.vibe_rules import VibeRule

class FavoriteItem(BaseModel):
    # speaker favorites carry more than id/name (images, service info); keep it all
    model_config = ConfigDict(extra="allow")

    id: str
    name: str = ""


class RecommendationRequest(BaseModel):
    household_name: str = Field(min_length=1)
    household_id: Optional[str] = None
    hour: Optional[int] = Field(default=None, ge=0, le=23)
    day: Optional[int] = Field(default=None, ge=0, le=6)
    timezone_offset_hours: Optional[float] = Field(default=None, ge=-14, le=14)
    items: Optional[list[FavoriteItem]] = None


class Recommendation(BaseModel):
    primary: Optional[FavoriteItem] = None
    alternatives: list[FavoriteItem] = Field(default_factory=list)
    current_rule: Optional[VibeRule] = None
    allowed_vibes: list[str] = Field(default_factory=list)
    debug: dict[str, Any] = Field(default_factory=dict)
