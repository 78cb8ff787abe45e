from datetime import timedelta

from ...domain.entities import Requester
from ...domain.errors import AuthorizationError
from ...domain.policy import can_purge
from ..dto import PurgeResult
from .notice_repository import INoticeRepository


class PurgeOldNotices:
    def __init__(self, repo: INoticeRepository):
        self.repo = repo

    def execute(self, requester: Requester, retention_window: timedelta) -> PurgeResult:
        if not can_purge(requester.role):
            raise AuthorizationError("Only admin can delete old notices")
        # граница считается самой БД в момент выполнения DELETE
        return PurgeResult(removed=self.repo.delete_older_than(retention_window))
