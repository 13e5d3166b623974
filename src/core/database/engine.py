from sqlalchemy.ext.asyncio import create_async_engine

from src.main.config import config

engine = create_async_engine(
    config.postgres.dsn_async,
    echo=config.postgres.DB_ECHO,
    pool_size=10,
    max_overflow=10,
    pool_timeout=30,
    pool_pre_ping=True,
    pool_recycle=60 * 30,
)
