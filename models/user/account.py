# models/user/account.py
from sqlalchemy import Column, Text, DateTime
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from models.base import Base


# ========== users ==========
class User(Base):
    """
    외부 IdP 가 발급한 계정.
    id 는 IdP subject(문자열) 그대로 사용, 로그인마다 upsert 된다.
    """
    __tablename__ = "users"

    id = Column(Text, primary_key=True)
    email = Column(Text, nullable=True, unique=True)
    first_name = Column(Text, nullable=True)
    last_name = Column(Text, nullable=True)
    profile_image_url = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    # 0..1
    partner = relationship("Partner", back_populates="user", uselist=False)
