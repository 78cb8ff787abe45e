from datetime import timedelta
from typing import assert_never

from .entities import Notice, Requester, Role

# Окно отображения доски и окно хранения совпадают: 30 дней.
BOARD_WINDOW_DAYS = 30
NOTICE_RETENTION_WINDOW = timedelta(days=BOARD_WINDOW_DAYS)

REGISTRABLE_ROLES = frozenset({Role.TEACHER, Role.STUDENT})


def sees_all_notices(role: Role) -> bool:
    match role:
        case Role.ADMIN | Role.STUDENT:
            return True
        case Role.TEACHER:
            return False
        case _:
            assert_never(role)


def can_post(role: Role) -> bool:
    match role:
        case Role.ADMIN | Role.TEACHER:
            return True
        case Role.STUDENT:
            return False
        case _:
            assert_never(role)


def can_delete_notices(role: Role) -> bool:
    match role:
        case Role.ADMIN | Role.TEACHER:
            return True
        case Role.STUDENT:
            return False
        case _:
            assert_never(role)


def can_delete(requester: Requester, notice: Notice) -> bool:
    match requester.role:
        case Role.ADMIN:
            return True
        case Role.TEACHER:
            return notice.teacher_id == requester.id
        case Role.STUDENT:
            return False
        case _:
            assert_never(requester.role)


def owner_scope(requester: Requester) -> int | None:
    """Ограничение по teacher_id для удаления; None означает «любая запись».

    Вызывать только для ролей, которым удаление вообще разрешено.
    """
    match requester.role:
        case Role.ADMIN:
            return None
        case Role.TEACHER:
            return requester.id
        case Role.STUDENT:
            raise ValueError("students have no delete scope")
        case _:
            assert_never(requester.role)


def can_purge(role: Role) -> bool:
    match role:
        case Role.ADMIN:
            return True
        case Role.TEACHER | Role.STUDENT:
            return False
        case _:
            assert_never(role)


def can_register_users(role: Role) -> bool:
    match role:
        case Role.ADMIN:
            return True
        case Role.TEACHER | Role.STUDENT:
            return False
        case _:
            assert_never(role)
