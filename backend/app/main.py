# app/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.core.db import init_db, close_db
from app.core.errors import register_exception_handlers
from app.core.logging import install_request_logging

from app.api.routers import auth, media, profile_pic

logger = logging.getLogger("uvicorn.error")


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_db(generate_schemas=settings.generate_schemas)
    logger.info("[startup] database ready (%s)", settings.env)
    yield
    await close_db()


def create_app() -> FastAPI:
    app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

    # CORS (any origin by default)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials="*" not in settings.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    install_request_logging(app)
    register_exception_handlers(app)

    # REST
    app.include_router(auth.router, prefix="/api")
    app.include_router(media.router, prefix="/api")
    app.include_router(profile_pic.router, prefix="/api")

    @app.get("/healthz")
    def healthz():
        return {"ok": True}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host=settings.host, port=settings.port, log_level=settings.log_level.lower())
