"""
Database compatibility helpers for MySQL/MariaDB and SQLite.
"""
from sqlalchemy import text
from sqlalchemy.exc import DBAPIError, IntegrityError, InterfaceError
from sqlalchemy.ext.asyncio import AsyncSession

MYSQL_DUPLICATE_ENTRY = 1062


def dialect_name(session: AsyncSession) -> str:
    """Name of the dialect the session is bound to ("mysql", "sqlite", ...)."""
    return session.bind.dialect.name


def foreign_key_checks_sql(dialect: str, enabled: bool) -> str:
    """Statement that toggles referential-integrity enforcement for a connection."""
    if dialect == "sqlite":
        return f"PRAGMA foreign_keys = {'ON' if enabled else 'OFF'}"
    return f"SET FOREIGN_KEY_CHECKS = {1 if enabled else 0}"


async def set_foreign_key_checks(session: AsyncSession, enabled: bool) -> None:
    await session.execute(text(foreign_key_checks_sql(dialect_name(session), enabled)))


def is_unique_violation(exc: IntegrityError) -> bool:
    """True when the driver reports a unique or primary-key conflict."""
    orig = getattr(exc, "orig", None)
    args = getattr(orig, "args", ())
    if args and args[0] == MYSQL_DUPLICATE_ENTRY:
        return True
    message = str(orig) if orig is not None else str(exc)
    return "UNIQUE constraint failed" in message or "Duplicate entry" in message


def is_connection_error(exc: Exception) -> bool:
    """True when the error means the connection itself is gone."""
    if isinstance(exc, InterfaceError):
        return True
    return isinstance(exc, DBAPIError) and bool(exc.connection_invalidated)
