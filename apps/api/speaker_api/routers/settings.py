from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException
from sqlalchemy.orm import Session

from speaker_api.core.database import get_db
from speaker_api.schemas.settings import HiddenFavoritesOut, HiddenFavoriteUpdate
from speaker_api.services.rule_repository import RepositoryUnavailable
from speaker_api.services.settings_store import (
    load_hidden_favorites,
    load_speaker_volumes,
    save_speaker_volumes,
    set_favorite_hidden,
)
from speaker_api.services.vibe_tags import load_playlist_vibes, save_playlist_vibes

router = APIRouter()


# --- Playlist vibes ---
@router.get("/playlist-vibes")
def get_playlist_vibes(db: Session = Depends(get_db)):
    try:
        return load_playlist_vibes(db)
    except RepositoryUnavailable as e:
        raise HTTPException(status_code=503, detail=str(e))


@router.put("/playlist-vibes")
def put_playlist_vibes(payload: dict[str, Any] = Body(...), db: Session = Depends(get_db)):
    try:
        return save_playlist_vibes(db, payload)
    except RepositoryUnavailable as e:
        raise HTTPException(status_code=503, detail=str(e))


# --- Hidden favorites ---
@router.get("/hidden-favorites", response_model=HiddenFavoritesOut)
def get_hidden_favorites(db: Session = Depends(get_db)):
    return HiddenFavoritesOut(favorite_ids=sorted(load_hidden_favorites(db)))


@router.put("/hidden-favorites/{favorite_id}")
def put_hidden_favorite(favorite_id: str, payload: HiddenFavoriteUpdate, db: Session = Depends(get_db)):
    try:
        hidden = set_favorite_hidden(db, favorite_id, payload.hidden)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"favorite_id": favorite_id, "hidden": hidden}


# --- Default speaker volumes ---
@router.get("/settings/volumes")
def get_volumes(db: Session = Depends(get_db)):
    return load_speaker_volumes(db)


@router.put("/settings/volumes")
def put_volumes(payload: dict[str, Any] = Body(...), db: Session = Depends(get_db)):
    return save_speaker_volumes(db, payload)
