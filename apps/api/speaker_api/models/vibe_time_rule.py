from sqlalchemy import Column, Integer, String, DateTime, JSON, CheckConstraint
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql import func

from speaker_api.core.database import Base

# JSONB on Postgres, plain JSON elsewhere (SQLite in tests)
JsonList = JSON().with_variant(JSONB(), "postgresql")

class VibeTimeRule(Base):
    __tablename__ = "vibe_time_rules"
    __table_args__ = (
        CheckConstraint("start_hour >= 0 AND start_hour <= 23", name="ck_vibe_time_rules_start_hour"),
        CheckConstraint("end_hour >= 0 AND end_hour <= 23", name="ck_vibe_time_rules_end_hour"),
        CheckConstraint("rule_type IN ('base', 'override')", name="ck_vibe_time_rules_rule_type"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)

    household_name = Column(String, nullable=False, index=True)
    name = Column(String, nullable=True)

    start_hour = Column(Integer, nullable=False)
    end_hour = Column(Integer, nullable=False)

    allowed_vibes = Column(JsonList, nullable=False)
    days = Column(JsonList, nullable=True)  # 0=Sun ... 6=Sat, NULL for base rules

    rule_type = Column(String, nullable=False, default="base", server_default="base")

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
