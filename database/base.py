# database/base.py
# 1) Base/metadata 는 models.base 의 것을 재사용
from models.base import Base, metadata  # 여기서 declarative_base() 절대 다시 만들지 말기

# 2) 모델 모듈 import → Base.metadata 에 테이블 등록 + relationship 문자열 해석
import models.user.account  # noqa: F401
import models.partner.partner_core  # noqa: F401
import models.partner.student  # noqa: F401
import models.common.course  # noqa: F401
import models.common.event  # noqa: F401

__all__ = ["Base", "metadata"]
