import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.middleware.cors import CORSMiddleware

from backend.app.api.v1.router import api_router
from backend.app.core.config import settings
from backend.app.core.errors import NotoraError
from backend.app.core.logging import setup_logging
from backend.app.db import init_models
from backend.app.db.base import AsyncSessionLocal, engine
from backend.app.services.refresh_tokens import RefreshTokenStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.LOG_LEVEL)
    await init_models(engine)

    # Expired refresh tokens are already inert; this only reclaims space
    async with AsyncSessionLocal() as db:
        purged = await RefreshTokenStore(db).purge_expired()
        await db.commit()
    if purged:
        logger.info("purged %s expired refresh token(s)", purged)

    logger.info("%s started (environment=%s)", settings.PROJECT_NAME, settings.ENVIRONMENT)
    yield
    await engine.dispose()


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.PROJECT_VERSION,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    lifespan=lifespan,
)


@app.exception_handler(NotoraError)
async def notora_error_handler(request: Request, exc: NotoraError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


# Set up CORS (cookies need explicit origins, never "*")
if settings.BACKEND_CORS_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[str(origin) for origin in settings.BACKEND_CORS_ORIGINS],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.include_router(api_router, prefix=settings.API_V1_STR)


@app.get("/")
def root():
    return {"message": f"Welcome to {settings.PROJECT_NAME} API"}
