import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from app.core.config import Settings, settings as default_settings
from app.api.v1.endpoints.auth import router as auth_router
from app.db.session import Base, build_engine, build_session_factory
from app.db.models.user import User  # noqa: F401

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Создаем таблицы в базе данных
    async with app.state.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Startup event completed. Database tables created.")
    yield
    await app.state.engine.dispose()
    logger.info("Database engine disposed.")

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings

    # Настройка логирования
    logging.basicConfig(level=settings.LOG_LEVEL, format=settings.LOG_FORMAT)

    app = FastAPI(title=settings.PROJECT_NAME, lifespan=lifespan)
    app.state.settings = settings
    app.state.engine = build_engine(settings)
    app.state.session_factory = build_session_factory(app.state.engine)

    # Register routers
    app.include_router(auth_router, prefix=f"{settings.API_V1_STR}/auth", tags=["auth"])

    return app

app = create_app()

if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host="0.0.0.0", port=8000)
