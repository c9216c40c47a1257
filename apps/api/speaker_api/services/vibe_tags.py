import logging
from typing import Any, Callable, Mapping, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from speaker_api.models.playlist_vibe import PlaylistVibe
from speaker_api.schemas.vibe_rules import VALID_VIBES
from speaker_api.services.rule_repository import RepositoryUnavailable

logger = logging.getLogger(__name__)


def sanitize_vibe_map(mapping: Mapping[Any, Any]) -> dict[str, str]:
    """Keep only string ids tagged with a canonical vibe."""
    return {
        item_id: vibe
        for item_id, vibe in (mapping or {}).items()
        if isinstance(item_id, str) and item_id.strip() and isinstance(vibe, str) and vibe in VALID_VIBES
    }


def load_playlist_vibes(db: Session) -> dict[str, str]:
    try:
        rows = db.execute(select(PlaylistVibe)).scalars().all()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("playlist_vibes load failed: %s", e)
        raise RepositoryUnavailable("Failed to load playlist vibes") from e
    return sanitize_vibe_map({r.playlist_id: r.vibe for r in rows})


def save_playlist_vibes(db: Session, mapping: Mapping[Any, Any]) -> dict[str, str]:
    """Replace the whole tag map. Invalid entries are dropped, not rejected."""
    sanitized = sanitize_vibe_map(mapping)
    dropped = len(mapping or {}) - len(sanitized)
    if dropped:
        logger.info("Ignored %d playlist vibe entries with unknown vibes", dropped)

    try:
        db.execute(delete(PlaylistVibe))
        for item_id, vibe in sanitized.items():
            db.add(PlaylistVibe(playlist_id=item_id, vibe=vibe))
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("playlist_vibes save failed: %s", e)
        raise RepositoryUnavailable("Failed to save playlist vibes") from e
    return sanitized


def vibe_lookup(mapping: Mapping[str, str]) -> Callable[[str], Optional[str]]:
    return lambda item_id: mapping.get(item_id)
