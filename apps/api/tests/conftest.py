import os

# must be set before speaker_api.core.* is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")

from contextlib import contextmanager

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from speaker_api.core.database import Base, get_db
from speaker_api.main import app
from speaker_api.services.rule_repository import RepositoryUnavailable, RuleNotFound, SqlRuleRepository


class InMemoryRuleRepository:
    """Stand-in for SqlRuleRepository holding raw rows in a list."""

    def __init__(self, rows=None, fail=False):
        self.rows = [dict(r) for r in (rows or [])]
        self.fail = fail
        self.locked = []
        self._next_id = max([r.get("id") or 0 for r in self.rows if isinstance(r.get("id"), int)] + [0]) + 1

    @contextmanager
    def lock_scope(self, household_name):
        self.locked.append(household_name)
        yield

    def list(self, household_name=None):
        if self.fail:
            raise RepositoryUnavailable("Failed to load vibe time rules")
        return [dict(r) for r in self.rows if household_name is None or r.get("household_name") == household_name]

    def insert(self, row):
        saved = {**row, "id": self._next_id}
        self._next_id += 1
        self.rows.append(saved)
        return dict(saved)

    def update(self, rule_id, row):
        for i, r in enumerate(self.rows):
            if r.get("id") == rule_id and r.get("household_name") == row.get("household_name"):
                self.rows[i] = {**row, "id": rule_id}
                return dict(self.rows[i])
        raise RuleNotFound(rule_id)

    def delete(self, rule_id, household_name=None):
        before = len(self.rows)
        self.rows = [
            r for r in self.rows
            if not (r.get("id") == rule_id and (household_name is None or r.get("household_name") == household_name))
        ]
        if len(self.rows) == before:
            raise RuleNotFound(rule_id)


@pytest.fixture
def memory_repo():
    return InMemoryRuleRepository()


@pytest.fixture
def make_memory_repo():
    return InMemoryRuleRepository


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def sql_repo(db):
    return SqlRuleRepository(db)


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
