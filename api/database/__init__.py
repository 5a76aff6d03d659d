from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from config import Settings

settings = Settings()

if settings.is_sqlite():
    engine = create_async_engine(
        settings.generate_postgres_url(),
        echo=settings.env.DEBUG,
        connect_args={"check_same_thread": False},
    )
else:
    engine = create_async_engine(
        settings.generate_postgres_url(),
        echo=settings.env.DEBUG,
        pool_pre_ping=True,
    )

async_session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_maker() as session:
        yield session


def get_async_session() -> AsyncSession:
    # For scripts and jobs that manage the session lifetime themselves
    return async_session_maker()
