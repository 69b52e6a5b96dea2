# main.py
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.config import APP_TITLE, APP_VERSION, CORS_ORIGINS, LOG_FORMAT, LOG_LEVEL
from core.errors import register_exception_handlers
from core.middleware import ProcessTimeMiddleware
from app.routers import register_routers

logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)


def create_app() -> FastAPI:
    app = FastAPI(
        title=APP_TITLE,
        version=APP_VERSION,
        description="Partner / student drone training portal API",
    )

    app.add_middleware(ProcessTimeMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    register_routers(app)
    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=9000, reload=True)
