import math
from typing import Any, Mapping

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from speaker_api.models.hidden_favorite import HiddenFavorite
from speaker_api.models.speaker_volume import SpeakerVolume


# ---------- speaker volumes ----------
def clamp_volume(value: Any):
    """0..100, or None when the value isn't numeric."""
    if isinstance(value, bool):
        return None
    try:
        numeric = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(numeric):
        return None
    return int(round(max(0.0, min(100.0, numeric))))


def load_speaker_volumes(db: Session) -> dict[str, int]:
    rows = db.execute(select(SpeakerVolume)).scalars().all()
    return {r.player_id: r.volume for r in rows}


def save_speaker_volumes(db: Session, mapping: Mapping[str, Any]) -> dict[str, int]:
    sanitized: dict[str, int] = {}
    for player_id, value in (mapping or {}).items():
        volume = clamp_volume(value)
        if volume is not None:
            sanitized[player_id] = volume

    db.execute(delete(SpeakerVolume))
    for player_id, volume in sanitized.items():
        db.add(SpeakerVolume(player_id=player_id, volume=volume))
    db.commit()
    return sanitized


# ---------- hidden favorites ----------
def load_hidden_favorites(db: Session) -> set[str]:
    return set(db.execute(select(HiddenFavorite.favorite_id)).scalars().all())


def set_favorite_hidden(db: Session, favorite_id: str, hidden: bool) -> bool:
    favorite_id = (favorite_id or "").strip()
    if not favorite_id:
        raise ValueError("Invalid favorite ID")

    if hidden:
        if db.get(HiddenFavorite, favorite_id) is None:
            db.add(HiddenFavorite(favorite_id=favorite_id))
    else:
        db.execute(delete(HiddenFavorite).where(HiddenFavorite.favorite_id == favorite_id))
    db.commit()
    return hidden
