from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func

from speaker_api.core.database import Base

class PlaylistVibe(Base):
    __tablename__ = "playlist_vibes"

    # favorite / playlist id as reported by the speaker cloud API
    playlist_id = Column(String, primary_key=True)
    vibe = Column(String, nullable=False)

    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
