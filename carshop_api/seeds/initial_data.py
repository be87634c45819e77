import asyncio
import logging

from sqlalchemy import select

from carshop_api.db.session import AsyncSessionLocal, async_engine
from carshop_api.models import Base, User
from carshop_api.core.security import get_password_hash

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

async def create_tables():
    async with async_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Tables created.")

async def seed_database():
    async with AsyncSessionLocal() as db:
        try:
            result = await db.execute(select(User).where(User.username == "admin"))
            admin_user = result.scalar_one_or_none()
            if not admin_user:
                logger.info("Creating default admin user...")
                admin_user = User(
                    username="admin",
                    email="admin@example.com",
                    full_name="System Administrator",
                    role="admin",
                    hashed_password=get_password_hash("admin123"),
                    is_active=True
                )
                db.add(admin_user)
            else:
                logger.info("Default admin user already exists.")

            await db.commit()

            logger.info("Seeding complete.")
            logger.info("Default admin user: username=admin password=admin123")
        except Exception as e:
            logger.error(f"An error occurred during seeding: {e}")
            await db.rollback()
            raise

async def main():
    await create_tables()
    await seed_database()
    await async_engine.dispose()

if __name__ == "__main__":
    # Run from the project root: python -m carshop_api.seeds.initial_data
    asyncio.run(main())
