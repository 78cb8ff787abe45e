from datetime import date, datetime, timedelta, timezone
from typing import Iterable

from ..domain.entities import Notice, Requester, Role
from ..domain.policy import BOARD_WINDOW_DAYS, can_delete, can_post
from .dto import BoardNotice, DayBucket


def as_utc(moment: datetime) -> datetime:
    # SQLite возвращает naive datetime, считаем его UTC
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def window_days(today: date, days: int = BOARD_WINDOW_DAYS) -> list[date]:
    """Последние `days` дней, от самого старого до сегодняшнего."""
    return [today - timedelta(days=offset) for offset in range(days - 1, -1, -1)]


def _bucket_order(item: BoardNotice) -> tuple[bool, float]:
    notice = item.notice
    return (notice.poster_role is not Role.ADMIN, -as_utc(notice.date).timestamp())


def build_board(
    notices: Iterable[Notice],
    viewer: Requester,
    today: date | None = None,
    days: int = BOARD_WINDOW_DAYS,
) -> list[DayBucket]:
    """Раскладывает объявления по дням скользящего окна.

    Внутри дня сначала объявления администрации, затем остальные;
    при равенстве более свежие выше. Объявления вне окна не попадают на доску.
    """
    today = today or datetime.now(timezone.utc).date()
    grouped: dict[date, list[BoardNotice]] = {day: [] for day in window_days(today, days)}

    for notice in notices:
        day = as_utc(notice.date).date()
        if day in grouped:
            grouped[day].append(BoardNotice(notice=notice, can_delete=can_delete(viewer, notice)))

    return [
        DayBucket(
            day=day,
            is_today=day == today,
            can_post=day == today and can_post(viewer.role),
            notices=sorted(items, key=_bucket_order),
        )
        for day, items in grouped.items()
    ]
