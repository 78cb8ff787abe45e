import structlog
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from ....infrastructure.db import get_db
from ....infrastructure.repositories import UserRepository
from ....infrastructure.security import PasswordHasher, create_access_token
from ....application.use_cases.authenticate_user import AuthenticateUser
from ....domain.entities import Requester
from ..authz import get_requester
from ..ratelimit import LOGIN_LIMIT, limiter
from ..schemas import LoginReq, TokenResp, UserResp

logger = structlog.get_logger()

router = APIRouter(prefix="/api/auth", tags=["auth"])

@router.post("/login", response_model=TokenResp)
@limiter.limit(LOGIN_LIMIT)
def login(
    request: Request,
    payload: LoginReq,
    db: Session = Depends(get_db),
):
    # строгий лимит на логин (защита от перебора паролей)
    user = AuthenticateUser(repo=UserRepository(db), hasher=PasswordHasher()).execute(
        payload.username, payload.password
    )
    if not user:
        logger.info("login_failed", username=payload.username)
        raise HTTPException(status_code=401, detail="Invalid credentials")
    token = create_access_token(user_id=user.id, role=user.role)
    return TokenResp(access_token=token, role=user.role, id=user.id)


@router.get("/me", response_model=UserResp)
def me(
    requester: Requester = Depends(get_requester),
    db: Session = Depends(get_db),
):
    user = UserRepository(db).get_by_id(requester.id)
    if not user:
        raise HTTPException(status_code=401, detail="User not found")
    return UserResp(id=user.id, username=user.username, role=user.role)
