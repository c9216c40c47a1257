import logging
import time
from typing import Callable, Optional

from fastapi import APIRouter, Depends, Header, HTTPException
from sqlalchemy.orm import Session

from speaker_api.core.config import settings
from speaker_api.core.database import get_db
from speaker_api.schemas.recommendations import FavoriteItem, Recommendation, RecommendationRequest
from speaker_api.services.recommender import recommend, resolve_time_context
from speaker_api.services.rule_loader import load_rules
from speaker_api.services.rule_repository import RepositoryUnavailable, SqlRuleRepository
from speaker_api.services.speaker_client import SpeakerApiError, SpeakerCloudClient
from speaker_api.services.token_store import load_tokens
from speaker_api.services.vibe_tags import load_playlist_vibes, vibe_lookup

router = APIRouter()
logger = logging.getLogger(__name__)

FavoritesSource = Callable[[Optional[str]], list[FavoriteItem]]


def get_favorites_source(
    x_device_id: Optional[str] = Header(default=None),
    db: Session = Depends(get_db),
) -> FavoritesSource:
    """Fetches the household's favorites with the calling device's tokens."""

    def fetch(household_id: Optional[str]) -> list[FavoriteItem]:
        if not x_device_id or not x_device_id.strip():
            raise HTTPException(status_code=400, detail="X-Device-Id header is required when items are not supplied")

        tokens = load_tokens(db, x_device_id)
        if not tokens["access_token"]:
            raise HTTPException(status_code=401, detail="Device is not signed in to the speaker cloud")
        if tokens["expires_at"] and tokens["expires_at"] <= int(time.time() * 1000):
            raise HTTPException(status_code=401, detail="Speaker cloud session expired, sign in again")

        with SpeakerCloudClient(
            settings.speaker_api_base_url,
            tokens["access_token"],
            timeout=settings.speaker_api_timeout_seconds,
        ) as client:
            return client.list_favorites(household_id)

    return fetch


@router.post("", response_model=Recommendation)
def recommend_now(
    req: RecommendationRequest,
    db: Session = Depends(get_db),
    fetch_favorites: FavoritesSource = Depends(get_favorites_source),
):
    """
    Pick a favorite for the current moment.

    hour/day/timezone_offset_hours come from the caller's clock; when missing
    the server clock is used. ``items`` may be supplied directly, otherwise
    the household favorites are fetched from the speaker cloud.
    """
    ctx = resolve_time_context(req.hour, req.day, req.timezone_offset_hours)
    rules = load_rules(SqlRuleRepository(db), req.household_name.strip())

    if req.items is not None:
        items = req.items
    else:
        try:
            items = fetch_favorites(req.household_id)
        except SpeakerApiError as e:
            logger.warning("Favorites fetch failed for %r: %s", req.household_id, e)
            raise HTTPException(status_code=502, detail=f"Failed to load favorites: {e}")

    try:
        vibes = load_playlist_vibes(db)
    except RepositoryUnavailable:
        # untagged favorites match no vibe, same as a household without rules
        vibes = {}
    return recommend(ctx.hour, ctx.day, rules, items, vibe_lookup(vibes), on_date=ctx.on_date)
