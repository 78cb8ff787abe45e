import functools
from datetime import timedelta

from sqlalchemy import delete, func, or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from .models import NoticeORM, UserORM
from ..domain.entities import Notice, Role, User
from ..domain.errors import AuthorizationError, StoreError, ValidationError
from ..application.use_cases.notice_repository import INoticeRepository
from ..application.use_cases.register_user import IUserRepository

def to_domain(u: UserORM) -> User:
    return User(id=u.id, username=u.username, role=Role(u.role))

def notice_to_domain(n: NoticeORM, poster_role: str | None, poster_name: str | None) -> Notice:
    return Notice(
        id=n.id,
        title=n.title,
        content=n.content,
        teacher_id=n.teacher_id,
        date=n.date,
        poster_role=Role(poster_role) if poster_role else None,
        poster_name=poster_name,
    )

def store_operation(method):
    """Любой сбой SQLAlchemy превращается в StoreError, сессия откатывается."""
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise StoreError(f"{type(self).__name__}.{method.__name__} failed") from exc
    return wrapper


class UserRepository(IUserRepository):
    def __init__(self, db: Session): self.db = db

    @store_operation
    def get_by_username(self, username: str) -> User | None:
        row = self.db.query(UserORM).filter(UserORM.username == username).first()
        return to_domain(row) if row else None

    @store_operation
    def get_by_id(self, user_id: int) -> User | None:
        row = self.db.get(UserORM, user_id)
        return to_domain(row) if row else None

    @store_operation
    def get_with_hash(self, username: str) -> tuple[User, str] | None:
        row = self.db.query(UserORM).filter(UserORM.username == username).first()
        return (to_domain(row), row.password_hash) if row else None

    @store_operation
    def create(self, username: str, password_hash: str, role: Role = Role.STUDENT) -> User:
        row = UserORM(username=username, password_hash=password_hash, role=role.value)
        self.db.add(row)
        try:
            self.db.commit()
        except IntegrityError:
            # параллельная регистрация успела раньше
            self.db.rollback()
            raise ValidationError("Username already exists")
        self.db.refresh(row)
        return to_domain(row)


class NoticeRepository(INoticeRepository):
    def __init__(self, db: Session): self.db = db

    def _with_poster(self):
        return (
            select(NoticeORM, UserORM.role, UserORM.username)
            .outerjoin(UserORM, NoticeORM.teacher_id == UserORM.id)
            .order_by(NoticeORM.date.desc(), NoticeORM.id.desc())
        )

    @store_operation
    def list_all(self) -> list[Notice]:
        rows = self.db.execute(self._with_poster()).all()
        return [notice_to_domain(*r) for r in rows]

    @store_operation
    def list_for_teacher(self, teacher_id: int) -> list[Notice]:
        q = self._with_poster().where(
            or_(UserORM.role == Role.ADMIN.value, NoticeORM.teacher_id == teacher_id)
        )
        rows = self.db.execute(q).all()
        return [notice_to_domain(*r) for r in rows]

    @store_operation
    def create(self, title: str, content: str, teacher_id: int) -> Notice:
        row = NoticeORM(title=title, content=content, teacher_id=teacher_id)
        self.db.add(row)
        try:
            self.db.commit()
        except IntegrityError:
            # токен пережил учётную запись автора
            self.db.rollback()
            raise AuthorizationError("Poster account does not exist")
        self.db.refresh(row)
        poster = self.db.get(UserORM, teacher_id)
        return notice_to_domain(
            row,
            poster.role if poster else None,
            poster.username if poster else None,
        )

    @store_operation
    def delete(self, notice_id: int, owner_id: int | None = None) -> bool:
        stmt = delete(NoticeORM).where(NoticeORM.id == notice_id)
        if owner_id is not None:
            stmt = stmt.where(NoticeORM.teacher_id == owner_id)
        result = self.db.execute(stmt.execution_options(synchronize_session=False))
        self.db.commit()
        return result.rowcount > 0

    @store_operation
    def exists(self, notice_id: int) -> bool:
        return self.db.query(NoticeORM.id).filter(NoticeORM.id == notice_id).first() is not None

    @store_operation
    def delete_older_than(self, window: timedelta) -> int:
        stmt = (
            delete(NoticeORM)
            .where(NoticeORM.date < self._cutoff(window))
            .execution_options(synchronize_session=False)
        )
        result = self.db.execute(stmt)
        self.db.commit()
        return result.rowcount

    def _cutoff(self, window: timedelta):
        # "сейчас" вычисляет БД в момент выполнения, а не приложение
        seconds = int(window.total_seconds())
        if self.db.get_bind().dialect.name == "sqlite":
            return func.datetime("now", f"-{seconds} seconds")
        return func.now() - func.make_interval(0, 0, 0, 0, 0, 0, seconds)
