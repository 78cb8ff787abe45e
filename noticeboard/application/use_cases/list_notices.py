from ...domain.entities import Notice, Requester
from ...domain.policy import sees_all_notices
from .notice_repository import INoticeRepository


class ListVisibleNotices:
    """Учителя видят объявления администрации и свои; остальные видят всё."""

    def __init__(self, repo: INoticeRepository):
        self.repo = repo

    def execute(self, requester: Requester) -> list[Notice]:
        if sees_all_notices(requester.role):
            return self.repo.list_all()
        return self.repo.list_for_teacher(requester.id)
