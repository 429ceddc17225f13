import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from chirper.api.http import (
    auth_router,
    follows_router,
    images_router,
    likes_router,
    oauth_router,
    tweets_router,
    users_router,
)
from chirper.core.config import settings
from chirper.core.db import Base, engine
from chirper.core.errors import register_exception_handlers
from chirper.domains.images.entities import IMAGES_URL_PREFIX
import chirper.db.models  # noqa: F401

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # В разработке схема создается сразу; в проде ее ведет alembic
    if not settings.is_prod:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    logger.info(f"Chirper started in {settings.env} mode")
    yield
    await engine.dispose()


app = FastAPI(
    title="Chirper",
    description="Бэкенд социальной сети в стиле Twitter",
    version="1.0.0",
    lifespan=lifespan
)

# Только SPA-клиент, вместе с cookie
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.client_url],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Загруженные изображения раздаются как статика
app.mount(
    f"/{IMAGES_URL_PREFIX}",
    StaticFiles(directory=settings.images_dir, check_dir=False),
    name="images"
)

# Подключаем роутеры
app.include_router(auth_router)
app.include_router(users_router)
app.include_router(tweets_router)
app.include_router(follows_router)
app.include_router(likes_router)
app.include_router(images_router)
app.include_router(oauth_router)


@app.get("/health")
async def health():
    """Проверка, что сервис отвечает"""
    return {"status": "ok"}
