from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class Role(str, Enum):
    ADMIN = "admin"
    TEACHER = "teacher"
    STUDENT = "student"


@dataclass(frozen=True)
class Requester:
    """Кто делает запрос: (id, role) из проверенного токена."""
    id: int
    role: Role


@dataclass(frozen=True)
class User:
    id: int | None
    username: str
    role: Role = Role.STUDENT


@dataclass(frozen=True)
class Notice:
    id: int
    title: str
    content: str
    teacher_id: int | None
    date: datetime
    poster_role: Role | None = None
    poster_name: str | None = None
