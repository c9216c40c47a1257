from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func

from speaker_api.core.database import Base

class HiddenFavorite(Base):
    __tablename__ = "hidden_favorites"

    favorite_id = Column(String, primary_key=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
