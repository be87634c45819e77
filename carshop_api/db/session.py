from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker

from carshop_api.core.config import settings

# One engine per process; its connection pool is the only state shared between requests.
async_engine = create_async_engine(settings.ASYNC_DATABASE_URL, echo=settings.SQL_ECHO)
AsyncSessionLocal = async_sessionmaker(
    bind=async_engine, expire_on_commit=False
)

async def get_async_db():
    async with AsyncSessionLocal() as session:
        yield session
