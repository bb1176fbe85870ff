"""Pytest configuration for repokit tests."""

from __future__ import annotations

from collections.abc import Generator
from typing import Any

import pytest
from sqlalchemy import Boolean, ForeignKey, Integer, String, create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Mapped, Session, mapped_column, relationship

from repokit.config import reset_config
from repokit.models import Base, SoftDeleteMixin, TenantMixin
from repokit.query import SessionResolver

ORG_A = "550e8400-e29b-41d4-a716-446655440000"
ORG_B = "6ba7b810-9dad-11d1-80b4-00c04fd430c8"


class User(SoftDeleteMixin, TenantMixin, Base):
    __tablename__ = "user_account"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    age: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    posts: Mapped[list[Post]] = relationship("Post", back_populates="author")


class Post(Base):
    __tablename__ = "post"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("user_account.id"), nullable=False)
    title: Mapped[str] = mapped_column(String(200), nullable=False)

    author: Mapped[User] = relationship("User", back_populates="posts")


class RecordingQuery:
    """
    Generative stand-in for an engine query builder.

    Every criteria application returns a new instance with one more label in
    `trace`, so tests can assert exactly which criteria ran and in what order.
    Terminal operations return the trace (or a marker) instead of touching storage.
    """

    def __init__(self, trace: tuple[str, ...] = (), log: list[tuple[str, ...]] | None = None):
        self.trace = trace
        self.log = log if log is not None else []

    def with_label(self, label: str) -> RecordingQuery:
        return RecordingQuery(self.trace + (label,), self.log)

    def _finish(self, op: str) -> tuple[str, ...]:
        self.log.append(self.trace)
        return self.trace + (op,)

    def where_equals(self, column: str, value: Any) -> RecordingQuery:
        return self.with_label(f"{column}={value}")

    def where_key(self, id: Any) -> RecordingQuery:
        return self.with_label(f"key={id}")

    def get(self, columns: Any = ("*",)) -> Any:
        return self._finish("get")

    def paginate(self, per_page: int, columns: Any = ("*",), page: int = 1) -> Any:
        self.log.append(self.trace)
        return {"per_page": per_page, "page": page, "columns": tuple(columns)}

    def simple_paginate(self, per_page: int, columns: Any = ("*",), page: int = 1) -> Any:
        self.log.append(self.trace)
        return {"per_page": per_page, "page": page, "columns": tuple(columns)}

    def find(self, id: Any, columns: Any = ("*",)) -> Any:
        return self._finish(f"find={id}")

    def find_or_fail(self, id: Any, columns: Any = ("*",)) -> Any:
        return self._finish(f"find_or_fail={id}")

    def first(self, columns: Any = ("*",)) -> Any:
        return self._finish("first")

    def first_or_fail(self, columns: Any = ("*",)) -> Any:
        return self._finish("first_or_fail")

    def count(self) -> int:
        self.log.append(self.trace)
        return len(self.trace)

    def update(self, attributes: Any) -> int:
        self.log.append(self.trace)
        return 1

    def delete(self) -> int:
        self.log.append(self.trace)
        return 1


class Label:
    """Criteria that appends its name to a `RecordingQuery` trace."""

    def __init__(self, name: str):
        self.name = name

    def apply(self, query: RecordingQuery) -> RecordingQuery:
        return query.with_label(self.name)


class RecordingResolver:
    """Resolver handing out `RecordingQuery` objects and recording `create` calls."""

    def __init__(self) -> None:
        self.log: list[tuple[str, ...]] = []
        self.created: list[tuple[type[Any], dict[str, Any]]] = []

    def new_query(self, model: type[Any]) -> RecordingQuery:
        return RecordingQuery(log=self.log)

    def create(self, model: type[Any], attributes: Any) -> Any:
        self.created.append((model, dict(attributes)))
        return model


@pytest.fixture(autouse=True)
def reset_config_for_tests(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Clear repokit settings from the environment and reset the config singleton."""
    for key in ["REPOKIT_PER_PAGE", "REPOKIT_ENV", "REPOKIT_SQL_ECHO", "DATABASE_URL"]:
        monkeypatch.delenv(key, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def engine() -> Generator[Engine, None, None]:
    """In-memory SQLite engine with the test schema created."""
    engine = create_engine("sqlite://")
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine: Engine) -> Generator[Session, None, None]:
    """Session bound to the in-memory engine, rolled back after each test."""
    with Session(engine, autoflush=False) as session:
        yield session
        session.rollback()


@pytest.fixture
def resolver(session: Session) -> SessionResolver:
    return SessionResolver(session)


@pytest.fixture
def users(session: Session) -> list[User]:
    """Five users across two tenants, one of them soft-deleted."""
    rows = [
        User(email="ada@example.com", name="Ada", age=36, org_id=ORG_A),
        User(email="grace@example.com", name="Grace", age=45, org_id=ORG_A),
        User(email="linus@example.com", name="Linus", age=28, org_id=ORG_B, active=False),
        User(email="barbara@example.com", name="Barbara", age=52, org_id=ORG_B),
        User(email="ken@example.com", name="Ken", age=61, org_id=ORG_A),
    ]
    session.add_all(rows)
    session.flush()
    rows[4].mark_deleted()
    session.add(Post(user_id=rows[0].id, title="Notes on the Analytical Engine"))
    session.flush()
    return rows


@pytest.fixture
def recording_resolver() -> RecordingResolver:
    return RecordingResolver()
