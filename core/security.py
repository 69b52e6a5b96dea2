# core/security.py
import secrets
from typing import Optional

from core.config import ACCESS_TOKEN_PREFIX, REFRESH_TOKEN_PREFIX


# ============================
# 토큰 발급 (개발용 스텁, IdP 연동 전까지)
# ============================

class TokenBundle:
    def __init__(self, access_token: str, refresh_token: str = "", token_type: str = "bearer"):
        self.access_token = access_token
        self.refresh_token = refresh_token
        self.token_type = token_type


def issue_tokens(user_id: str) -> TokenBundle:
    """
    access_token = dev-access-<user_id>
    refresh_token = dev-refresh-<random>
    """
    access = f"{ACCESS_TOKEN_PREFIX}{user_id}"
    refresh = REFRESH_TOKEN_PREFIX + secrets.token_hex(8)
    return TokenBundle(access_token=access, refresh_token=refresh)


def parse_access_token(token: Optional[str]) -> Optional[str]:
    """dev-access-<user_id> 에서 user_id 추출. 형식이 다르면 None."""
    if not token or not token.startswith(ACCESS_TOKEN_PREFIX):
        return None
    user_id = token[len(ACCESS_TOKEN_PREFIX):].strip()
    return user_id or None
