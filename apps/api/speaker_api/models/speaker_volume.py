from sqlalchemy import Column, Integer, String, DateTime, CheckConstraint
from sqlalchemy.sql import func

from speaker_api.core.database import Base

class SpeakerVolume(Base):
    __tablename__ = "speaker_volumes"
    __table_args__ = (
        CheckConstraint("volume >= 0 AND volume <= 100", name="ck_speaker_volumes_volume"),
    )

    player_id = Column(String, primary_key=True)
    volume = Column(Integer, nullable=False)

    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
