import structlog
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from ....infrastructure.db import get_db
from ....infrastructure.repositories import UserRepository
from ....infrastructure.security import PasswordHasher
from ....application.use_cases.register_user import RegisterUser
from ....domain.entities import Requester
from ..authz import get_requester
from ..ratelimit import REGISTER_LIMIT, limiter
from ..schemas import UserCreate, UserResp

logger = structlog.get_logger()

router = APIRouter(prefix="/api/users", tags=["users"])

@router.post("", response_model=UserResp, status_code=status.HTTP_201_CREATED)
@limiter.limit(REGISTER_LIMIT)
def register_user(
    request: Request,
    payload: UserCreate,
    requester: Requester = Depends(get_requester),
    db: Session = Depends(get_db),
):
    uc = RegisterUser(repo=UserRepository(db), hasher=PasswordHasher())
    user = uc.execute(requester, payload.username, payload.password, payload.role)
    logger.info("user_registered", user_id=user.id, role=user.role.value, by=requester.id)
    return UserResp(id=user.id, username=user.username, role=user.role)
