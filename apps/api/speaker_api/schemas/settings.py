from pydantic import BaseModel

class HiddenFavoriteUpdate(BaseModel):
    hidden: bool


class HiddenFavoritesOut(BaseModel):
    favorite_ids: list[str]
