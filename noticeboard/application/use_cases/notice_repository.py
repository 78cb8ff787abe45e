from datetime import timedelta

from ...domain.entities import Notice


class INoticeRepository:
    def list_all(self) -> list[Notice]: ...
    def list_for_teacher(self, teacher_id: int) -> list[Notice]: ...
    def create(self, title: str, content: str, teacher_id: int) -> Notice: ...
    def delete(self, notice_id: int, owner_id: int | None = None) -> bool: ...
    def exists(self, notice_id: int) -> bool: ...
    def delete_older_than(self, window: timedelta) -> int: ...
