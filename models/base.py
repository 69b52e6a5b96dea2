# Base, MetaData(naming_convention), 공통 mixin
from __future__ import annotations

from sqlalchemy.orm import declarative_base
from sqlalchemy import MetaData, Column, BigInteger, Integer, DateTime, JSON
from sqlalchemy.sql import func
from sqlalchemy.dialects.postgresql import JSONB

NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=NAMING_CONVENTION)
Base = declarative_base(metadata=metadata)

# 운영(PostgreSQL)은 JSONB, 테스트(SQLite)는 일반 JSON
JSONList = JSON().with_variant(JSONB(), "postgresql")

# SQLite 는 INTEGER PRIMARY KEY 에서만 autoincrement 동작
BigIntPK = BigInteger().with_variant(Integer, "sqlite")


class IdPKMixin:
    id = Column(BigIntPK, primary_key=True, autoincrement=True)


class TimeStampMixin:
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
