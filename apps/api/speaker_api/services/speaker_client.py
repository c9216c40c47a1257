import logging
from typing import Any, Optional
from urllib.parse import quote

import requests

from speaker_api.schemas.recommendations import FavoriteItem

logger = logging.getLogger(__name__)


class SpeakerApiError(RuntimeError):
    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class SpeakerCloudClient:
    """
    Minimal read-only client for the speaker cloud control API.

    Only what the recommender needs: households and their favorites.
    """

    def __init__(self, base_url: str, access_token: str, timeout: float = 10.0, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.access_token = access_token
        self.timeout = timeout
        self._owns_session = session is None
        self.session = session or requests.Session()

    def close(self) -> None:
        # a caller-supplied session stays open
        if self._owns_session:
            self.session.close()

    def __enter__(self) -> "SpeakerCloudClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _get(self, path: str) -> Any:
        url = f"{self.base_url}{path}"
        try:
            r = self.session.get(
                url,
                headers={"Authorization": f"Bearer {self.access_token}"},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise SpeakerApiError(f"Speaker API request failed: {e}") from e

        if r.status_code != 200:
            logger.warning("Speaker API GET %s returned %s", path, r.status_code)
            raise SpeakerApiError(f"Speaker API returned status {r.status_code}", status=r.status_code)

        try:
            return r.json()
        except ValueError as e:
            raise SpeakerApiError("Speaker API returned invalid JSON") from e

    def list_households(self) -> list[str]:
        payload = self._get("/households") or {}
        return [h["id"] for h in payload.get("households", []) if isinstance(h, dict) and h.get("id")]

    def resolve_household_id(self, preferred: Optional[str] = None) -> str:
        preferred = (preferred or "").strip()
        if preferred:
            return preferred
        households = self.list_households()
        if not households:
            raise SpeakerApiError("No households available for this account", status=404)
        return households[0]

    def list_favorites(self, household_id: Optional[str] = None) -> list[FavoriteItem]:
        household_id = self.resolve_household_id(household_id)
        payload = self._get(f"/households/{quote(household_id, safe='')}/favorites") or {}
        items = []
        for raw in payload.get("items", []):
            if isinstance(raw, dict) and raw.get("id"):
                items.append(FavoriteItem(**{**raw, "id": str(raw["id"]), "name": raw.get("name") or ""}))
        return items
