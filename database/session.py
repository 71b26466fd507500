from typing import Annotated
from fastapi import Depends
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession  # type: ignore[attr-defined]
from sqlmodel import SQLModel
import asyncio
import logging
import ssl

from config import Settings, settings

logger = logging.getLogger(__name__)


# Handle SSL for cloud deployments (like Railway/Heroku)
def build_connect_args(db_settings: Settings) -> dict:
    if db_settings.is_local_database:
        return {}

    ssl_context = ssl.create_default_context()
    if not db_settings.DB_SSL_VERIFY:
        # Some managed Postgres hosts present certificates that do not match their hostname
        ssl_context.check_hostname = False
        ssl_context.verify_mode = ssl.CERT_NONE
        logger.warning("Database TLS certificate verification disabled (DB_SSL_VERIFY=false)")
    return {"ssl": ssl_context}


connect_args = build_connect_args(settings)

engine = create_async_engine(
    url=settings.POSTGRES_URL,
    # Log sql queries
    echo=settings.DB_ECHO,
    pool_pre_ping=True,  # Verify connection before usage
    connect_args=connect_args,
)

# Create async session factory using SQLModel's AsyncSession
async_session_maker = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def create_db_tables(max_retries: int = 5, retry_delay: float = 5):
    for attempt in range(max_retries):
        try:
            logger.info(f"Attempting to create database tables (Attempt {attempt + 1}/{max_retries})...")
            async with engine.begin() as connection:
                await connection.run_sync(SQLModel.metadata.create_all)
            logger.info("Database tables created successfully!")
            return
        except Exception as e:
            logger.error(f"Error creating database tables: {e}")
            if attempt < max_retries - 1:
                logger.info(f"Retrying in {retry_delay} seconds...")
                await asyncio.sleep(retry_delay)
            else:
                logger.error("Max retries reached. Could not connect to database.")
                raise


async def get_session():
    async with async_session_maker() as session:
        yield session


SessionDep = Annotated[AsyncSession, Depends(get_session)]
