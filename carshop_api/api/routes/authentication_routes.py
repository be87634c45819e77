from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from carshop_api import models, schemas
from carshop_api.data_access import user_repo
from carshop_api.db.session import get_async_db
from carshop_api.core import security
from carshop_api.api import dependencies

router = APIRouter()

@router.post("/register", response_model=schemas.user_schemas.UserReadSchema, status_code=status.HTTP_201_CREATED)
async def register_new_user(
    user_in: schemas.user_schemas.UserCreateSchema,
    db: Annotated[AsyncSession, Depends(get_async_db)],
):
    """
    Create a new user.
    """
    user = await user_repo.get_by_email(db, email=user_in.email)
    if user:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="The user with this email already exists in the system.",
        )
    user = await user_repo.get_by_username(db, username=user_in.username)
    if user:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="The user with this username already exists in the system.",
        )

    return await user_repo.create(db, obj_in=user_in)


@router.post("/login", response_model=schemas.token_schemas.TokenSchema)
async def login_for_access_token(
    login_data: schemas.token_schemas.LoginRequestSchema,
    db: Annotated[AsyncSession, Depends(get_async_db)],
):
    """
    Login to get an access token.
    """
    user = await user_repo.authenticate(db, username=login_data.username, password=login_data.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password",
        )
    if not user.is_active:  # type: ignore
        raise HTTPException(status_code=400, detail="Inactive user")

    return {
        "access_token": security.create_access_token(subject=user.id),
        "refresh_token": security.create_refresh_token(subject=user.id),
        "token_type": "Bearer",
    }


@router.get("/users/me", response_model=schemas.user_schemas.UserReadSchema)
async def read_users_me(
    current_user: Annotated[models.User, Depends(dependencies.get_current_active_user)]
):
    return current_user
