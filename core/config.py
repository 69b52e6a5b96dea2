# core/config.py
import os
from dotenv import load_dotenv

# 0) .env 로드
load_dotenv()

# 1) 앱
APP_TITLE = os.getenv("APP_TITLE", "Partner Training Portal API")
APP_VERSION = os.getenv("APP_VERSION", "0.1.0")
API_PREFIX = os.getenv("API_PREFIX", "/api")
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

# 2) 로깅
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# 3) DB
DB = os.getenv("DB", "postgresql")
DB_USER = os.getenv("DB_USER", "")
DB_PASSWORD = os.getenv("DB_PASSWORD", "")
DB_SERVER = os.getenv("DB_SERVER", "")
DB_PORT = os.getenv("DB_PORT", "5432")
DB_NAME = os.getenv("DB_NAME", "")

# 1순위 DATABASE_URL, 없으면 개별 값 조합 (database/session 에서 처리)
DATABASE_URL = os.getenv("DATABASE_URL", "")
SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() == "true"

# 4) 인증 스텁
# Authorization: Bearer dev-access-{user_id}
ACCESS_TOKEN_PREFIX = "dev-access-"
REFRESH_TOKEN_PREFIX = "dev-refresh-"

# 5) 도메인 기본값
DEFAULT_CLASSIFICATION = "bronze"
UPCOMING_EVENTS_LIMIT = int(os.getenv("UPCOMING_EVENTS_LIMIT", "10"))
RATE_PRECISION = 2  # completion_rate 소수점 자리수
