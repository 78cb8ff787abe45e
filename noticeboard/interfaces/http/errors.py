import structlog
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from ...domain.errors import (
    AuthorizationError,
    NoticeBoardError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from ...infrastructure.metrics import authz_denials_total

logger = structlog.get_logger()

STATUS_BY_ERROR = {
    AuthorizationError: status.HTTP_403_FORBIDDEN,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ValidationError: status.HTTP_400_BAD_REQUEST,
    StoreError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


async def noticeboard_error_handler(request: Request, exc: NoticeBoardError):
    status_code = STATUS_BY_ERROR.get(type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)
    detail = exc.message

    if isinstance(exc, StoreError):
        # подробности хранилища остаются в логах
        logger.error(
            "store_error",
            method=request.method,
            path=request.url.path,
            error=exc.message,
            cause=repr(exc.__cause__),
        )
        detail = "Server error"
    elif isinstance(exc, AuthorizationError):
        authz_denials_total.inc()

    return JSONResponse(status_code=status_code, content={"detail": detail})


def add_error_handlers(app: FastAPI):
    app.add_exception_handler(NoticeBoardError, noticeboard_error_handler)
