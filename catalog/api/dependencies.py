"""
FastAPI API dependencies.
"""

from typing import AsyncGenerator, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from catalog.core.config import settings
from catalog.core.security import decode_access_token, verify_password
from catalog.db.models.user import User
from catalog.db.repositories.category import CategoryRepository
from catalog.db.session import async_session_factory
from catalog.services.categories import CategoryService


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency for getting an async database session.
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_PREFIX}/auth/login", auto_error=False)


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    """Get user by email."""
    query = select(User).where(User.email == email.lower())
    result = await db.execute(query)
    return result.scalars().first()  # type: ignore[no-any-return]


async def authenticate_user(db: AsyncSession, email: str, password: str) -> Optional[User]:
    """Return the user when the email/password pair is valid."""
    user = await get_user_by_email(db, email=email)
    if not user:
        return None

    if not verify_password(password, str(user.hashed_password)):
        return None

    return user


async def get_current_user(
    db: AsyncSession = Depends(get_db_session),
    token: Optional[str] = Depends(oauth2_scheme),
) -> User:
    """Get current user from token."""
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No token provided. Authorization denied.",
            headers={"WWW-Authenticate": "Bearer"},
        )

    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid or expired token. Authorization denied.",
        headers={"WWW-Authenticate": "Bearer"},
    )
    subject = decode_access_token(token)
    if subject is None:
        raise credentials_exception

    result = await db.execute(select(User).where(User.id == subject))
    user = result.scalars().first()

    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found. Authorization denied.",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return user  # type: ignore[no-any-return]


async def get_current_active_user(
    current_user: User = Depends(get_current_user),
) -> User:
    """Get current active user."""
    if not current_user.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Inactive user")
    return current_user


async def get_category_service(db: AsyncSession = Depends(get_db_session)) -> CategoryService:
    """Build the category service on the request's session."""
    return CategoryService(CategoryRepository(db))
