from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.auth import router as auth_router
from app.api.projects import router as projects_router
from app.api.reviews import router as reviews_router
from app.api.tasks import router as tasks_router
from app.core.config import settings
from app.core.error_handling import install_error_handling
from app.core.logging import configure_logging, get_logger
from app.db.session import init_db

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

configure_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    logger.info("app.startup environment=%s", settings.environment)
    await init_db()
    yield
    logger.info("app.shutdown")


app = FastAPI(title="Project Hours Tracker API", lifespan=lifespan)

origins = settings.cors_origin_list
if origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

install_error_handling(app)


@app.get("/healthz")
def healthz() -> dict[str, bool]:
    return {"ok": True}


api_v1 = APIRouter(prefix=settings.api_prefix)
api_v1.include_router(auth_router)
api_v1.include_router(projects_router)
api_v1.include_router(tasks_router)
api_v1.include_router(reviews_router)
app.include_router(api_v1)
