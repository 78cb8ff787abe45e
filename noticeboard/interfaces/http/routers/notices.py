from dataclasses import asdict

import structlog
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ....infrastructure.db import get_db
from ....infrastructure.repositories import NoticeRepository
from ....infrastructure.cache import bump_generation, get_cache, get_generation, set_cache
from ....infrastructure.metrics import (
    cache_hits_total,
    cache_misses_total,
    db_queries_total,
    notices_created_total,
    notices_deleted_total,
    notices_purged_total,
)
from ....application.board import build_board
from ....application.use_cases.create_notice import CreateNotice
from ....application.use_cases.delete_notice import DeleteNotice
from ....application.use_cases.list_notices import ListVisibleNotices
from ....application.use_cases.purge_old_notices import PurgeOldNotices
from ....domain.entities import Requester
from ....domain.policy import NOTICE_RETENTION_WINDOW, sees_all_notices
from ..authz import get_requester
from ..schemas import BoardNoticeOut, DayBucketOut, NoticeCreate, NoticeOut, PurgeResp

logger = structlog.get_logger()

router = APIRouter(prefix="/api/notices", tags=["notices"])

def listing_cache_key(requester: Requester, generation: int) -> str:
    # админ и студент видят одно и то же, учитель - свою выборку
    if sees_all_notices(requester.role):
        return f"notices:list:g{generation}:all"
    return f"notices:list:g{generation}:teacher:{requester.id}"

def invalidate_listings() -> None:
    # старые поколения дочитывать некому, они истекут по TTL
    bump_generation("notices")

@router.get("", response_model=list[NoticeOut])
def list_notices(requester: Requester = Depends(get_requester), db: Session = Depends(get_db)):
    # поколение читается до запроса к БД: запись, закоммиченная после
    # чтения, сдвинет его, и устаревший список ляжет под мёртвый ключ
    generation = get_generation("notices")
    cache_key = listing_cache_key(requester, generation) if generation is not None else None
    cached = get_cache(cache_key) if cache_key else None
    if cached is not None:
        cache_hits_total.inc()
        return cached

    cache_misses_total.inc()
    db_queries_total.inc()
    notices = ListVisibleNotices(NoticeRepository(db)).execute(requester)
    result = [NoticeOut.model_validate(n) for n in notices]
    if cache_key:
        set_cache(cache_key, [r.model_dump(mode="json") for r in result])
    return result

@router.get("/board", response_model=list[DayBucketOut])
def notice_board(requester: Requester = Depends(get_requester), db: Session = Depends(get_db)):
    db_queries_total.inc()
    notices = ListVisibleNotices(NoticeRepository(db)).execute(requester)
    return [
        DayBucketOut(
            day=bucket.day,
            label=bucket.day.strftime("%d-%m-%Y"),
            is_today=bucket.is_today,
            can_post=bucket.can_post,
            notices=[
                BoardNoticeOut.model_validate({**asdict(item.notice), "can_delete": item.can_delete})
                for item in bucket.notices
            ],
        )
        for bucket in build_board(notices, requester)
    ]

@router.post("", response_model=NoticeOut, status_code=status.HTTP_201_CREATED)
def create_notice(
    payload: NoticeCreate,
    requester: Requester = Depends(get_requester),
    db: Session = Depends(get_db),
):
    notice = CreateNotice(NoticeRepository(db)).execute(requester, payload.title, payload.content)
    invalidate_listings()
    notices_created_total.labels(role=requester.role.value).inc()
    logger.info("notice_created", notice_id=notice.id, teacher_id=notice.teacher_id)
    return NoticeOut.model_validate(notice)

# /old объявлен раньше /{notice_id}, иначе путь перехватит удаление по id
@router.delete("/old", response_model=PurgeResp)
def purge_old_notices(requester: Requester = Depends(get_requester), db: Session = Depends(get_db)):
    result = PurgeOldNotices(NoticeRepository(db)).execute(requester, NOTICE_RETENTION_WINDOW)
    if not result.nothing_removed:
        invalidate_listings()
        notices_purged_total.inc(result.removed)
    logger.info("notices_purged", removed=result.removed, retention_days=NOTICE_RETENTION_WINDOW.days)
    return PurgeResp(removed=result.removed, nothing_removed=result.nothing_removed, message=result.message)

@router.delete("/{notice_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_notice(
    notice_id: int,
    requester: Requester = Depends(get_requester),
    db: Session = Depends(get_db),
):
    DeleteNotice(NoticeRepository(db)).execute(requester, notice_id)
    invalidate_listings()
    notices_deleted_total.labels(role=requester.role.value).inc()
    logger.info("notice_deleted", notice_id=notice_id, by=requester.id)
