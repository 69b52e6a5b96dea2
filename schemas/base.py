# schemas/base.py
from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ORMBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class APIModel(ORMBase):
    """
    wire 포맷은 camelCase (utmTag, certificateRequested ...),
    파이썬 쪽은 snake_case 그대로. 요청은 두 형식 모두 허용.
    """
    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )