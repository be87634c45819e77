from typing import Annotated

from fastapi import Depends, HTTPException
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from jose import jwt, JWTError
from pydantic import ValidationError

from carshop_api.core import security
from carshop_api.db.session import get_async_db
from carshop_api.data_access import user_repo, CarRepository
from carshop_api.models import User
from carshop_api.schemas import token_schemas
from carshop_api.services.car_service import CarService

http_bearer_scheme = HTTPBearer()

async def get_current_user(
    auth: Annotated[HTTPAuthorizationCredentials, Depends(http_bearer_scheme)],
    db: Annotated[AsyncSession, Depends(get_async_db)],
) -> User:
    """
    Dependency to get the current user from a Bearer token.
    1. Extracts the token from the Authorization header.
    2. Decodes and validates the token.
    3. Fetches the user from the database.
    """
    token = auth.credentials
    try:
        payload = jwt.decode(
            token, security.settings.JWT_SECRET_KEY, algorithms=[security.ALGORITHM]
        )
        token_data = token_schemas.TokenPayloadSchema(sub=payload.get("sub"))
        user_id = int(token_data.sub)
    except (JWTError, ValidationError, ValueError):
        raise security.CREDENTIALS_EXCEPTION

    user = await user_repo.get_by_user_id(db, user_id=user_id)
    if user is None:
        raise security.CREDENTIALS_EXCEPTION
    return user

async def get_current_active_user(
    current_user: Annotated[User, Depends(get_current_user)]
) -> User:
    """
    A further dependency that checks if the user is active.
    """
    if not current_user.is_active:  # type: ignore
        raise HTTPException(status_code=400, detail="Inactive user")
    return current_user

def get_car_service(
    db: Annotated[AsyncSession, Depends(get_async_db)],
) -> CarService:
    """Builds the car service on top of the request's session."""
    return CarService(CarRepository(db))
