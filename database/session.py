# database/session.py
from __future__ import annotations

import logging
from typing import Generator, Optional
from urllib.parse import quote_plus

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from core import config
import database.base  # noqa: F401  (모델 등록)

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------------
# 1) DB URL 설정
#    - 우선순위:
#      1) 환경변수 DATABASE_URL
#      2) DB, DB_USER, DB_PASSWORD, DB_SERVER, DB_PORT, DB_NAME 조합
# -----------------------------------------------------------------------------------
def build_database_url() -> str:
    if config.DATABASE_URL:
        return config.DATABASE_URL

    if not all([config.DB_USER, config.DB_PASSWORD, config.DB_SERVER, config.DB_NAME]):
        raise RuntimeError(
            "DB 접속 정보가 없습니다. "
            "환경변수 DATABASE_URL 또는 .env 의 DB_USER/DB_PASSWORD/DB_SERVER/DB_NAME 을 확인해줘."
        )

    driver = "postgresql+psycopg2" if (config.DB or "").lower().startswith("postgres") else config.DB
    user = quote_plus(config.DB_USER)
    pwd = quote_plus(config.DB_PASSWORD)
    return f"{driver}://{user}:{pwd}@{config.DB_SERVER}:{config.DB_PORT}/{config.DB_NAME}"


def build_engine(url: Optional[str] = None) -> Engine:
    url = url or build_database_url()
    kwargs = {"echo": config.SQL_ECHO, "future": True}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
    else:
        kwargs["pool_pre_ping"] = True
    return create_engine(url, **kwargs)


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        future=True,
    )


# -----------------------------------------------------------------------------------
# 2) 프로세스 단위 Engine / SessionLocal (첫 요청 시 생성)
# -----------------------------------------------------------------------------------
_engine: Optional[Engine] = None
_session_factory: Optional[sessionmaker] = None


def get_session_factory() -> sessionmaker:
    global _engine, _session_factory
    if _session_factory is None:
        _engine = build_engine()
        _session_factory = build_session_factory(_engine)
        logger.info("database engine ready: %s", _engine.url.render_as_string(hide_password=True))
    return _session_factory


# FastAPI Depends(get_db) 에서 쓸 세션 팩토리 (테스트는 dependency_overrides 로 교체)
def get_db() -> Generator[Session, None, None]:
    db: Session = get_session_factory()()
    try:
        yield db
    finally:
        db.close()
