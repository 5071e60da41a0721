from __future__ import annotations

import os

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ["SCHEDULER_ENABLED"] = "false"

from datetime import datetime
from itertools import count
from typing import Callable, Iterator

import pytest
from fastapi import Depends
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

import app.db.models  # noqa: F401
from app.db.models import Category, Tag, Todo, TodoStatus, User
from app.db.session import Base, get_db
from app.core.security import get_current_user

_emails = count(1)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine) -> Iterator[Session]:
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_user(db: Session) -> Callable[..., User]:
    def _make_user(email: str | None = None, first_name: str | None = None, last_name: str | None = None) -> User:
        user = User(
            email=email or f"user{next(_emails)}@example.com",
            hashed_password="not-a-real-hash",
            first_name=first_name,
            last_name=last_name,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def user(make_user) -> User:
    return make_user("owner@example.com", "Olive", "Owner")


@pytest.fixture
def make_todo(db: Session) -> Callable[..., Todo]:
    def _make_todo(owner: User, title: str = "Todo", **fields) -> Todo:
        fields.setdefault("status", TodoStatus.PENDING)
        todo = Todo(title=title, user_id=owner.id, **fields)
        db.add(todo)
        db.commit()
        db.refresh(todo)
        return todo

    return _make_todo


@pytest.fixture
def category(db: Session) -> Category:
    category = Category(name="Work", color="#ff0000")
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


@pytest.fixture
def tag(db: Session) -> Tag:
    tag = Tag(name="urgent", color="#00ff00")
    db.add(tag)
    db.commit()
    db.refresh(tag)
    return tag


@pytest.fixture
def now() -> datetime:
    return datetime(2024, 6, 15, 12, 0, 0)


@pytest.fixture
def acting_user(user) -> dict:
    """Mutable holder for the user the test client authenticates as."""
    return {"id": user.id}


@pytest.fixture
def client(engine, acting_user) -> Iterator[TestClient]:
    from app.main import app

    TestingSession = sessionmaker(bind=engine, autocommit=False, autoflush=False)

    def _get_db():
        session = TestingSession()
        try:
            yield session
        finally:
            session.close()

    def _current_user(db: Session = Depends(get_db)) -> User:
        return db.get(User, acting_user["id"])

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_current_user] = _current_user
    yield TestClient(app)
    app.dependency_overrides.clear()
