import pytest
from unittest.mock import MagicMock, patch

from conftest import auth_header
from noticeboard.config import settings
from noticeboard.infrastructure.cache import bump_generation, get_cache, get_generation, set_cache
from noticeboard.infrastructure.models import NoticeORM
from noticeboard.infrastructure.repositories import NoticeRepository
from noticeboard.interfaces.http.routers.notices import invalidate_listings


@pytest.fixture(autouse=True)
def enable_cache(monkeypatch):
    # в остальных тестах кэш выключен через окружение
    monkeypatch.setattr(settings, "CACHE_ENABLED", True)


class FakeRedis:
    """Словарь вместо Redis: get/setex/incr"""
    def __init__(self):
        self.data = {}

    def get(self, key):
        return self.data.get(key)

    def setex(self, key, ttl, value):
        self.data[key] = value

    def incr(self, key):
        self.data[key] = int(self.data.get(key, 0)) + 1
        return self.data[key]


@pytest.fixture
def fake_redis():
    fake = FakeRedis()
    with patch('noticeboard.infrastructure.cache.get_redis', return_value=fake):
        yield fake


@patch('noticeboard.infrastructure.cache.get_redis')
def test_get_cache_hit(mock_redis):
    """Тест получения значения из кэша (hit)"""
    mock_client = MagicMock()
    mock_client.get.return_value = '[{"id": 1}]'
    mock_redis.return_value = mock_client

    assert get_cache("notices:list:g0:all") == [{"id": 1}]
    mock_client.get.assert_called_once_with("notices:list:g0:all")


@patch('noticeboard.infrastructure.cache.get_redis')
def test_get_cache_miss(mock_redis):
    mock_client = MagicMock()
    mock_client.get.return_value = None
    mock_redis.return_value = mock_client

    assert get_cache("notices:list:g0:all") is None


@patch('noticeboard.infrastructure.cache.get_redis')
def test_cache_errors_degrade_to_miss(mock_redis):
    """Redis недоступен - запрос не падает"""
    mock_redis.side_effect = Exception("Redis error")

    assert get_cache("k") is None
    assert set_cache("k", [1]) is False
    assert get_generation("notices") is None
    assert bump_generation("notices") is None


@patch('noticeboard.infrastructure.cache.get_redis')
def test_set_cache_uses_ttl(mock_redis):
    mock_client = MagicMock()
    mock_redis.return_value = mock_client

    assert set_cache("k", {"title": "Праздник"}, ttl=30) is True
    mock_client.setex.assert_called_once_with("k", 30, '{"title": "Праздник"}')


@patch('noticeboard.infrastructure.cache.get_redis')
def test_generation_starts_at_zero_and_bumps(mock_redis):
    mock_client = MagicMock()
    mock_client.get.side_effect = [None, "3"]
    mock_client.incr.return_value = 4
    mock_redis.return_value = mock_client

    assert get_generation("notices") == 0
    assert get_generation("notices") == 3
    assert bump_generation("notices") == 4
    mock_client.incr.assert_called_once_with("notices:generation")


@patch('noticeboard.infrastructure.cache.get_redis')
def test_disabled_cache_never_touches_redis(mock_redis, monkeypatch):
    monkeypatch.setattr(settings, "CACHE_ENABLED", False)

    assert get_cache("k") is None
    assert set_cache("k", 1) is False
    assert get_generation("notices") is None
    assert bump_generation("notices") is None
    mock_redis.assert_not_called()


def test_listing_served_from_cache_until_write(client, users, make_notice, fake_redis):
    make_notice("Holiday", users["admin"])
    headers = auth_header(users["student"])

    assert [n["title"] for n in client.get("/api/notices", headers=headers).json()] == ["Holiday"]
    assert "notices:list:g0:all" in fake_redis.data

    created = client.post("/api/notices", json={"title": "Exam", "content": "Room 12"}, headers=auth_header(users["admin"]))
    assert created.status_code == 201
    assert fake_redis.data["notices:generation"] == 1

    titles = [n["title"] for n in client.get("/api/notices", headers=headers).json()]
    assert set(titles) == {"Holiday", "Exam"}


def test_write_during_listing_does_not_pin_stale_result(client, users, make_notice, db_session, fake_redis):
    """Удаление, закоммиченное между чтением из БД и записью в кэш, не остаётся в кэше"""
    notice = make_notice("Holiday", users["admin"])
    headers = auth_header(users["student"])
    original_list_all = NoticeRepository.list_all

    def list_all_then_concurrent_delete(self):
        rows = original_list_all(self)
        db_session.query(NoticeORM).filter(NoticeORM.id == notice.id).delete()
        db_session.commit()
        invalidate_listings()
        return rows

    with patch.object(NoticeRepository, "list_all", list_all_then_concurrent_delete):
        in_flight = client.get("/api/notices", headers=headers)
    assert [n["title"] for n in in_flight.json()] == ["Holiday"]

    assert client.get("/api/notices", headers=headers).json() == []
