from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from ..config import settings


def enable_sqlite_foreign_keys(engine: Engine) -> Engine:
    # SQLite проверяет внешние ключи только после PRAGMA на каждом соединении
    @event.listens_for(engine, "connect")
    def _set_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()
    return engine


def build_engine(url: str) -> Engine:
    if url.startswith("sqlite"):
        # FastAPI выполняет синхронные обработчики в пуле потоков
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return enable_sqlite_foreign_keys(create_engine(url, echo=False, **kwargs))

    connect_args = {}
    if url.startswith("postgresql"):
        connect_args = {"client_encoding": "utf8"}
    return create_engine(
        url,
        pool_pre_ping=True,
        pool_size=10,
        max_overflow=20,
        pool_recycle=3600,
        connect_args=connect_args,
        echo=False
    )


engine = build_engine(settings.DATABASE_URL)
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)

def get_db():
    db = SessionLocal()
    try: yield db
    finally: db.close()
