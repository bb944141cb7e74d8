import logging
from typing import Optional

from fastapi import APIRouter, Depends, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.config import Settings
from app.core.exceptions import DatabaseError, DuplicateEmailError, HashingError, TokenIssuanceError
from app.core.security import TokenSubject, hash_password, issue_tokens, verify_password
from app.db.repositories.user import count_by_email, get_user_by_email, insert_user
from app.db.session import get_db, get_settings
from app.schemas.user import (
    LoginRequest,
    RegisterRequest,
    RegisterResponse,
    ResponseCore,
    UserProfile,
)

logger = logging.getLogger(__name__)

router = APIRouter()

# Строки в БД ещё нет, поэтому id заглушка
PLACEHOLDER_USER_ID = 0

EMAIL_EXISTS = "Email already exists"


def _reply(status_code: int, message: str, core: Optional[ResponseCore] = None,
           error: Optional[str] = None) -> JSONResponse:
    body = RegisterResponse(response_message=message, response=core, error=error)
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
async def register(
    payload: RegisterRequest,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """
    Регистрация пользователя.
    - **first_name**, **last_name**: Имя и фамилия
    - **email**: Электронная почта (уникальная)
    - **password**: Пароль
    - **Возвращает**: профиль созданного пользователя
    """
    email = payload.email

    # Токены выпускаются, но не возвращаются (их выдаёт /login)
    try:
        issue_tokens(
            settings.TOKEN_REALM,
            TokenSubject(id=PLACEHOLDER_USER_ID, email=email),
            settings,
        )
    except TokenIssuanceError as e:
        logger.error("Token generation failed for %s: %s", email, e)
        return _reply(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to generate tokens",
                      error=f"Token generation error: {e}")
    logger.debug("Issued %s token pair for %s", settings.TOKEN_REALM, email)

    try:
        hashed_password = await run_in_threadpool(hash_password, payload.password, settings.BCRYPT_ROUNDS)
    except HashingError as e:
        logger.warning("Password hashing failed for %s: %s", email, e)
        return _reply(status.HTTP_400_BAD_REQUEST, "Failed to hash password",
                      error=f"Password hashing error: {e}")

    try:
        existing = await count_by_email(db, email)
    except DatabaseError as e:
        if settings.UNIQUENESS_CHECK_POLICY == "fail_closed":
            logger.error("Email pre-check failed for %s: %s", email, e)
            return _reply(status.HTTP_500_INTERNAL_SERVER_ERROR, "Registration failed",
                          error=f"Database error: {e}")
        logger.warning("Email pre-check failed for %s, continuing: %s", email, e)
        existing = 0

    if existing > 0:
        logger.info("Registration rejected, email %s already exists", email)
        return _reply(status.HTTP_403_FORBIDDEN, "Registration failed", error=EMAIL_EXISTS)

    full_name = f"{payload.first_name} {payload.last_name}"
    try:
        new_user = await insert_user(db, email, hashed_password, full_name, None)
    except DuplicateEmailError:
        return _reply(status.HTTP_403_FORBIDDEN, "Registration failed", error=EMAIL_EXISTS)
    except DatabaseError as e:
        logger.error("Insert failed for %s: %s", email, e)
        return _reply(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to register user",
                      error=f"Database error: {e}")

    logger.info("Registered user %s (id=%s)", email, new_user.id)
    return _reply(
        status.HTTP_201_CREATED,
        f"User with email '{email}' registered successfully!",
        core=ResponseCore(user_profile=UserProfile.from_user(new_user)),
    )


@router.post("/login", response_model=RegisterResponse)
async def login(
    payload: LoginRequest,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Аутентификация пользователя по email и паролю, возвращает пару токенов."""
    email = payload.email

    try:
        user = await get_user_by_email(db, email)
    except DatabaseError as e:
        logger.error("User lookup failed for %s: %s", email, e)
        return _reply(status.HTTP_500_INTERNAL_SERVER_ERROR, "Login failed",
                      error=f"Database error: {e}")

    if user is None or not await run_in_threadpool(verify_password, payload.password, user.password):
        logger.info("Invalid credentials for %s", email)
        return _reply(status.HTTP_401_UNAUTHORIZED, "Login failed", error="Invalid credentials")

    try:
        tokens = issue_tokens(settings.TOKEN_REALM, TokenSubject(id=user.id, email=user.email), settings)
    except TokenIssuanceError as e:
        logger.error("Token generation failed for %s: %s", email, e)
        return _reply(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to generate tokens",
                      error=f"Token generation error: {e}")

    logger.info("Login: %s (id=%s)", user.email, user.id)
    return _reply(
        status.HTTP_200_OK,
        f"User with email '{email}' logged in successfully!",
        core=ResponseCore(user_profile=UserProfile.from_user(user), tokens=tokens),
    )
