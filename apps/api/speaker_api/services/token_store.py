from typing import Any, Mapping

from sqlalchemy.orm import Session

from speaker_api.models.device_token import DeviceToken

EMPTY_TOKENS = {"access_token": None, "refresh_token": None, "expires_at": 0}


def _require_device(device_id: str) -> str:
    device_id = (device_id or "").strip()
    if not device_id:
        raise ValueError("Device ID is required")
    return device_id


def load_tokens(db: Session, device_id: str) -> dict[str, Any]:
    """Tokens for a device; a device that never logged in gets empty tokens."""
    row = db.get(DeviceToken, _require_device(device_id))
    if row is None:
        return dict(EMPTY_TOKENS)
    return {
        "access_token": row.access_token,
        "refresh_token": row.refresh_token,
        "expires_at": int(row.expires_at or 0),
    }


def save_tokens(db: Session, tokens: Mapping[str, Any], device_id: str) -> dict[str, Any]:
    device_id = _require_device(device_id)
    to_save = {
        "access_token": tokens.get("access_token") or None,
        "refresh_token": tokens.get("refresh_token") or None,
        "expires_at": int(tokens.get("expires_at") or 0),
    }
    row = db.get(DeviceToken, device_id)
    if row is None:
        row = DeviceToken(device_id=device_id)
        db.add(row)
    for k, v in to_save.items():
        setattr(row, k, v)
    db.commit()
    return to_save


def clear_tokens(db: Session, device_id: str) -> dict[str, Any]:
    return save_tokens(db, EMPTY_TOKENS, device_id)
