from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterator, Optional

from sqlalchemy import delete, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from speaker_api.models.vibe_time_rule import VibeTimeRule

logger = logging.getLogger(__name__)

ROW_FIELDS = (
    "id",
    "household_name",
    "name",
    "start_hour",
    "end_hour",
    "allowed_vibes",
    "days",
    "rule_type",
    "created_at",
    "updated_at",
)
WRITABLE_FIELDS = ("household_name", "name", "start_hour", "end_hour", "allowed_vibes", "days", "rule_type")


class RepositoryUnavailable(RuntimeError):
    pass


class RuleNotFound(LookupError):
    def __init__(self, rule_id: int):
        super().__init__(f"Vibe time rule {rule_id} not found")
        self.rule_id = rule_id


def _row(r: VibeTimeRule) -> dict[str, Any]:
    return {f: getattr(r, f) for f in ROW_FIELDS}


class SqlRuleRepository:
    """
    Rule storage over the ``vibe_time_rules`` table.

    Rows go in and out as plain dicts; typing and cleanup happen in
    ``rule_loader``. Every write commits, so a lock taken with
    ``lock_scope`` is held from the sibling read through the write.
    """

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _guard(self, action: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("vibe_time_rules %s failed: %s", action, e)
            raise RepositoryUnavailable(f"Failed to {action} vibe time rules") from e

    @contextmanager
    def lock_scope(self, household_name: str) -> Iterator[None]:
        # Serializes validate+write per household on Postgres. Released on commit/rollback.
        if self.db.get_bind().dialect.name == "postgresql":
            with self._guard("lock"):
                self.db.execute(
                    text("SELECT pg_advisory_xact_lock(hashtext(:household))"),
                    {"household": household_name},
                )
        try:
            yield
        except Exception:
            self.db.rollback()
            raise

    def list(self, household_name: Optional[str] = None) -> list[dict[str, Any]]:
        stmt = select(VibeTimeRule).order_by(VibeTimeRule.start_hour, VibeTimeRule.id)
        if household_name is not None:
            stmt = stmt.where(VibeTimeRule.household_name == household_name)
        with self._guard("load"):
            return [_row(r) for r in self.db.execute(stmt).scalars().all()]

    def insert(self, row: dict[str, Any]) -> dict[str, Any]:
        with self._guard("insert"):
            obj = VibeTimeRule(**{k: row.get(k) for k in WRITABLE_FIELDS})
            self.db.add(obj)
            self.db.commit()
            self.db.refresh(obj)
            return _row(obj)

    def update(self, rule_id: int, row: dict[str, Any]) -> dict[str, Any]:
        with self._guard("update"):
            obj = self.db.get(VibeTimeRule, rule_id)
            if obj is None or obj.household_name != row.get("household_name"):
                raise RuleNotFound(rule_id)
            for k in WRITABLE_FIELDS:
                setattr(obj, k, row.get(k))
            self.db.commit()
            self.db.refresh(obj)
            return _row(obj)

    def delete(self, rule_id: int, household_name: Optional[str] = None) -> None:
        stmt = delete(VibeTimeRule).where(VibeTimeRule.id == rule_id)
        if household_name is not None:
            stmt = stmt.where(VibeTimeRule.household_name == household_name)
        with self._guard("delete"):
            res = self.db.execute(stmt)
            if not int(getattr(res, "rowcount", 0) or 0):
                self.db.rollback()
                raise RuleNotFound(rule_id)
            self.db.commit()
