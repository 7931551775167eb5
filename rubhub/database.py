"""
Database configuration and session management.

Both stores share one connection string: the target (application) schema is
reached through an async SQLAlchemy engine, the legacy schema through a plain
PyMySQL connection that is only ever read.
"""
from dataclasses import dataclass
from typing import Optional

import pymysql
from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import StaticPool

from rubhub.config import get_settings
from rubhub.migration.errors import ConfigurationError

settings = get_settings()

DEFAULT_MYSQL_PORT = 3306

# Base class for models
Base = declarative_base()


@dataclass(frozen=True)
class ConnectionConfig:
    host: str
    port: int
    user: str
    password: str


def parse_connection_url(url: Optional[str]) -> ConnectionConfig:
    """Split the shared connection string into host/port/user/password"""
    if not url:
        raise ConfigurationError("DATABASE_URL not set")
    try:
        parsed = make_url(url)
    except ArgumentError as e:
        raise ConfigurationError(f"DATABASE_URL is not a valid URL: {e}") from e
    if not parsed.host:
        raise ConfigurationError("DATABASE_URL has no host")

    return ConnectionConfig(
        host=parsed.host,
        port=parsed.port or DEFAULT_MYSQL_PORT,
        user=parsed.username or "",
        password=parsed.password or "",
    )


def _get_async_url(url: str) -> str:
    """Convert database URL to async variant"""
    if url.startswith("mysql://"):
        return url.replace("mysql://", "mysql+aiomysql://", 1)
    if url.startswith("mysql+pymysql://"):
        return url.replace("mysql+pymysql://", "mysql+aiomysql://", 1)
    if url.startswith("sqlite:///"):
        return url.replace("sqlite:///", "sqlite+aiosqlite:///", 1)
    return url


def target_url(config: ConnectionConfig, database: str) -> str:
    """Async URL of the application database"""
    url = make_url("mysql+aiomysql://").set(
        username=config.user,
        password=config.password,
        host=config.host,
        port=config.port,
        database=database,
    )
    return url.render_as_string(hide_password=False)


def create_engine(url: str) -> AsyncEngine:
    """Create the async engine for the target store"""
    database_url = _get_async_url(url)
    engine_kwargs = {
        "echo": settings.DEBUG,
        "future": True,
    }

    if database_url.startswith("sqlite"):
        # In-memory SQLite must keep a single connection alive across sessions
        if ":memory:" in database_url or database_url.endswith("://"):
            engine_kwargs["poolclass"] = StaticPool
            engine_kwargs["connect_args"] = {"check_same_thread": False}
    else:
        # Rows are written one at a time on one connection
        engine_kwargs["pool_size"] = 1
        engine_kwargs["max_overflow"] = 0
        engine_kwargs["pool_pre_ping"] = True

    return create_async_engine(database_url, **engine_kwargs)


def make_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    """Create async session factory"""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False
    )


def connect_legacy(config: ConnectionConfig, database: str) -> pymysql.connections.Connection:
    """Open a read-only-by-convention connection to the legacy database"""
    return pymysql.connect(
        host=config.host,
        port=config.port,
        user=config.user,
        password=config.password,
        database=database,
        cursorclass=pymysql.cursors.DictCursor,
        charset="utf8mb4",
    )
