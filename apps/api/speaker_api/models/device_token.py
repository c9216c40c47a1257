from sqlalchemy import Column, String, BigInteger, DateTime
from sqlalchemy.sql import func

from speaker_api.core.database import Base

class DeviceToken(Base):
    __tablename__ = "device_tokens"

    device_id = Column(String, primary_key=True)

    access_token = Column(String, nullable=True)
    refresh_token = Column(String, nullable=True)
    expires_at = Column(BigInteger, nullable=False, default=0)  # epoch millis

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
