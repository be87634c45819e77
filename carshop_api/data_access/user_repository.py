from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from carshop_api.core.security import get_password_hash, verify_password
from carshop_api.models import User
from carshop_api.schemas import user_schemas

class UserRepository:
    async def authenticate(self, db: AsyncSession, *, username: str, password: str) -> User | None:
        user = await self.get_by_username(db, username=username)
        if not user:
            return None
        if not verify_password(password, user.hashed_password):  # type: ignore
            return None
        return user

    async def get_by_email(self, db: AsyncSession, *, email: str) -> User | None:
        result = await db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def get_by_username(self, db: AsyncSession, *, username: str) -> User | None:
        result = await db.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()

    async def get_by_user_id(self, db: AsyncSession, *, user_id: int) -> User | None:
        return await db.get(User, user_id)

    async def create(self, db: AsyncSession, *, obj_in: user_schemas.UserCreateSchema) -> User:
        db_obj = User(
            username=obj_in.username,
            email=obj_in.email,
            full_name=obj_in.full_name,
            hashed_password=get_password_hash(obj_in.password),
            is_active=True,
        )

        db.add(db_obj)
        await db.commit()
        await db.refresh(db_obj)
        return db_obj

user_repo = UserRepository()
