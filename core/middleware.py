# core/middleware.py
import logging
import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("api.request")


class ProcessTimeMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        process_time = time.perf_counter() - start
        # 헤더로 내려주기
        response.headers["X-Process-Time"] = f"{process_time:.3f}"
        # /api 요청만 한 줄 로그
        if request.url.path.startswith("/api"):
            logger.info(
                "%s %s %s %.1fms",
                request.method, request.url.path, response.status_code, process_time * 1000,
            )
        return response
