import os
import sys
from datetime import datetime, timedelta, timezone

import pytest

CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.dirname(CURRENT_DIR)
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

# Настройки читаются при первом импорте пакета, поэтому задаём их до него
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("CACHE_ENABLED", "false")

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from noticeboard.domain.entities import Role
from noticeboard.infrastructure.db import enable_sqlite_foreign_keys, get_db
from noticeboard.infrastructure.models import Base, NoticeORM, UserORM
from noticeboard.infrastructure.security import create_access_token
from noticeboard.main import app

# Тестовая БД в памяти, одно соединение на все потоки
test_engine = enable_sqlite_foreign_keys(create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
))
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)

def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()

app.dependency_overrides[get_db] = override_get_db


@pytest.fixture
def db_session():
    """Чистая схема на каждый тест"""
    Base.metadata.drop_all(bind=test_engine)
    Base.metadata.create_all(bind=test_engine)
    session = TestingSessionLocal()
    yield session
    session.close()
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def client(db_session):
    yield TestClient(app)


@pytest.fixture
def users(db_session):
    """admin=1, учитель A=2, учитель B=3, студент=4"""
    rows = {
        "admin": UserORM(id=1, username="admin", password_hash="-", role="admin"),
        "teacher_a": UserORM(id=2, username="alice", password_hash="-", role="teacher"),
        "teacher_b": UserORM(id=3, username="bob", password_hash="-", role="teacher"),
        "student": UserORM(id=4, username="sam", password_hash="-", role="student"),
    }
    db_session.add_all(rows.values())
    db_session.commit()
    return rows


def auth_header(user: UserORM) -> dict:
    token = create_access_token(user_id=user.id, role=Role(user.role))
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_notice(db_session):
    """Вставляет объявление с датой в прошлом"""
    def _make(title: str, author: UserORM | None, days_ago: float = 0) -> NoticeORM:
        row = NoticeORM(
            title=title,
            content=f"{title} content",
            teacher_id=author.id if author else None,
            date=datetime.now(timezone.utc) - timedelta(days=days_ago),
        )
        db_session.add(row)
        db_session.commit()
        db_session.refresh(row)
        return row
    return _make
