from ...domain.entities import Requester
from ...domain.errors import AuthorizationError, NotFoundError
from ...domain.policy import can_delete_notices, owner_scope
from .notice_repository import INoticeRepository


class DeleteNotice:
    def __init__(self, repo: INoticeRepository):
        self.repo = repo

    def execute(self, requester: Requester, notice_id: int) -> None:
        if not can_delete_notices(requester.role):
            raise AuthorizationError("Students cannot delete notices")

        # условное удаление одной командой; существование проверяем
        # только если ничего не удалилось, чтобы выбрать 404 или 403
        if self.repo.delete(notice_id, owner_id=owner_scope(requester)):
            return
        if self.repo.exists(notice_id):
            raise AuthorizationError("Teachers can only delete their own notices")
        raise NotFoundError("Notice not found")
