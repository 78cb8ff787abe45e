from ...domain.entities import Notice, Requester
from ...domain.errors import AuthorizationError
from ...domain.policy import can_post
from .notice_repository import INoticeRepository


class CreateNotice:
    def __init__(self, repo: INoticeRepository):
        self.repo = repo

    def execute(self, requester: Requester, title: str, content: str) -> Notice:
        if not can_post(requester.role):
            raise AuthorizationError("Only teachers and admins can post notices")
        return self.repo.create(title, content, teacher_id=requester.id)
