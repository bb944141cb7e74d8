from typing import Literal

from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    PROJECT_NAME: str = "User Registration Service"
    API_V1_STR: str = ""
    DATABASE_URL: str = "sqlite+aiosqlite:///./users.db"
    DB_ECHO: bool = False
    SECRET_KEY: str = "change-me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7
    TOKEN_REALM: str = "auth"
    BCRYPT_ROUNDS: int = 12
    # What to do when the email pre-check query itself fails
    UNIQUENESS_CHECK_POLICY: Literal["fail_open", "fail_closed"] = "fail_open"
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    class Config:
        env_file = ".env"

settings = Settings()
