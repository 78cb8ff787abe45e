from datetime import date, datetime
from pydantic import BaseModel, Field
from ...domain.entities import Role

class LoginReq(BaseModel):
    username: str
    password: str

class TokenResp(BaseModel):
    access_token: str
    token_type: str = "bearer"
    role: Role
    id: int

class UserCreate(BaseModel):
    username: str = Field(min_length=1, max_length=64)
    password: str = Field(min_length=1)
    # строка, а не Role: недопустимую роль отклоняет ядро с ValidationError
    role: str

class UserResp(BaseModel):
    id: int
    username: str
    role: Role
    class Config: from_attributes = True

class NoticeCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    content: str = Field(min_length=1)

class NoticeOut(BaseModel):
    id: int
    title: str
    content: str
    teacher_id: int | None = None
    date: datetime
    poster_role: Role | None = None
    poster_name: str | None = None
    class Config: from_attributes = True

class BoardNoticeOut(NoticeOut):
    can_delete: bool

class DayBucketOut(BaseModel):
    day: date
    label: str
    is_today: bool
    can_post: bool
    notices: list[BoardNoticeOut]

class PurgeResp(BaseModel):
    removed: int
    nothing_removed: bool
    message: str
