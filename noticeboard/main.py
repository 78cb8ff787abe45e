import time
import logging
import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy import text

from .infrastructure.db import engine, SessionLocal
from .infrastructure.models import Base
from .infrastructure.metrics import (
    metrics_endpoint,
    http_requests_total,
    http_request_duration_seconds
)
from .infrastructure.repositories import UserRepository
from .infrastructure.security import PasswordHasher
from .application.use_cases.bootstrap_admin import BootstrapAdmin
from .interfaces.http.errors import add_error_handlers
from .interfaces.http.ratelimit import limiter
from .interfaces.http.routers import auth as auth_router
from .interfaces.http.routers import notices as notices_router
from .interfaces.http.routers import users as users_router
from .config import settings

# Настройка структурированного логирования
log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
structlog.configure(
    processors=[
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.make_filtering_bound_logger(log_level),
    context_class=dict,
    logger_factory=structlog.PrintLoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()

app = FastAPI(title="Notice Board Service", version="0.1.0")

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
add_error_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

def endpoint_label(request: Request) -> str:
    # шаблон маршрута, а не сырой путь: иначе каждый id даёт новый ряд метрик
    route = request.scope.get("route")
    return getattr(route, "path", None) or "<unmatched>"


# Кодировка ответа, метрики и лог каждого запроса
@app.middleware("http")
async def add_charset_header(request: Request, call_next):
    start_time = time.time()
    method = request.method
    path = request.url.path

    response = await call_next(request)

    if response.headers.get("content-type", "").startswith("application/json"):
        response.headers["content-type"] = "application/json; charset=utf-8"

    # Метрики
    duration = time.time() - start_time
    status_code = response.status_code
    endpoint = endpoint_label(request)
    http_requests_total.labels(method=method, endpoint=endpoint, status=status_code).inc()
    http_request_duration_seconds.labels(method=method, endpoint=endpoint).observe(duration)

    # Логирование
    logger.info(
        "http_request",
        method=method,
        path=path,
        status_code=status_code,
        duration_ms=round(duration * 1000, 2)
    )

    return response


def bootstrap_admin() -> None:
    username = settings.BOOTSTRAP_ADMIN_USERNAME
    password = settings.BOOTSTRAP_ADMIN_PASSWORD
    if not (username and password):
        return
    db = SessionLocal()
    try:
        created = BootstrapAdmin(repo=UserRepository(db), hasher=PasswordHasher()).execute(username, password)
    finally:
        db.close()
    if created:
        logger.info("admin_bootstrapped", username=username, user_id=created.id)


@app.on_event("startup")
def on_startup():
    logger.info("Starting notice board service", version="0.1.0")
    Base.metadata.create_all(bind=engine)

    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))
    logger.info("Database connection established")
    bootstrap_admin()


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/metrics")
def metrics():
    """Prometheus metrics endpoint"""
    return metrics_endpoint()


app.include_router(auth_router.router)
app.include_router(notices_router.router)
app.include_router(users_router.router)
