from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.api.dependencies import authenticate_user, get_db_session, get_user_by_email
from catalog.api.responses import DataResponseModel, default_error_responses
from catalog.core.security import create_access_token, get_password_hash
from catalog.db.models.user import User
from catalog.schemas.auth import AuthPayload, UserCreate, UserLogin, UserResponse

router = APIRouter()


def _auth_payload(user: User) -> AuthPayload:
    return AuthPayload(user=UserResponse.model_validate(user), token=create_access_token(subject=user.id))


@router.post(
    "/register",
    response_model=DataResponseModel[AuthPayload],
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user.",
    responses=default_error_responses,
)
async def register(
    user_in: UserCreate,
    db: AsyncSession = Depends(get_db_session),
) -> Any:
    """Register a new user and return an access token for it."""
    if await get_user_by_email(db, user_in.email):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="User with this email already exists",
        )

    db_user = User(
        name=user_in.name,
        email=user_in.email,
        hashed_password=get_password_hash(user_in.password),
        is_active=True,
    )
    db.add(db_user)
    await db.commit()
    await db.refresh(db_user)

    logger.info(f"Registered user {db_user.id}")
    return DataResponseModel[AuthPayload](message="User registered successfully", data=_auth_payload(db_user))


@router.post(
    "/login",
    response_model=DataResponseModel[AuthPayload],
    summary="Login and get access token.",
    responses=default_error_responses,
)
async def login(
    credentials: UserLogin,
    db: AsyncSession = Depends(get_db_session),
) -> Any:
    """Exchange email and password for an access token."""
    user = await authenticate_user(db, credentials.email, credentials.password)
    if not user:
        logger.warning("Failed login attempt")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Inactive user",
        )

    return DataResponseModel[AuthPayload](message="Login successful", data=_auth_payload(user))
