import logging
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.exceptions import DatabaseError, DuplicateEmailError
from app.db.models.user import User

logger = logging.getLogger(__name__)

def _is_unique_violation(exc: Exception) -> bool:
    text = str(exc)
    return isinstance(exc, IntegrityError) or "unique" in text or "duplicate" in text

async def count_by_email(db: AsyncSession, email: str) -> int:
    try:
        result = await db.execute(
            select(func.count()).select_from(User).where(User.email == email)
        )
    except SQLAlchemyError as exc:
        await db.rollback()
        raise DatabaseError(str(exc)) from exc
    return result.scalar_one()

async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    try:
        result = await db.execute(select(User).where(User.email == email))
    except SQLAlchemyError as exc:
        await db.rollback()
        raise DatabaseError(str(exc)) from exc
    return result.scalars().first()

async def insert_user(
    db: AsyncSession,
    email: str,
    hashed_password: str,
    full_name: str,
    profile_image_url: Optional[str] = None,
) -> User:
    """
    Insert a user row and return it refreshed from the database.

    The unique constraint on ``users.email`` is the authority on duplicates:
    a violation is reported as DuplicateEmailError, anything else as DatabaseError.
    """
    user = User(
        email=email,
        password=hashed_password,
        full_name=full_name,
        profile_image_url=profile_image_url,
    )
    db.add(user)
    try:
        await db.commit()
        await db.refresh(user)
    except SQLAlchemyError as exc:
        await db.rollback()
        if _is_unique_violation(exc):
            logger.warning("Unique constraint rejected email %s", email)
            raise DuplicateEmailError(email) from exc
        raise DatabaseError(str(exc)) from exc
    return user
