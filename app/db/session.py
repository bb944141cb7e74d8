from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base
from app.core.config import Settings

# Базовый класс моделей
Base = declarative_base()

def build_engine(settings: Settings) -> AsyncEngine:
    # Для SQLite разрешаем доступ из другого потока
    if "sqlite" in settings.DATABASE_URL:
        connect_args = {"check_same_thread": False}
    else:
        connect_args = {}

    return create_async_engine(
        settings.DATABASE_URL,
        connect_args=connect_args,
        echo=settings.DB_ECHO,
    )

def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)

async def get_db(request: Request):
    async with request.app.state.session_factory() as session:
        yield session

def get_settings(request: Request) -> Settings:
    return request.app.state.settings
