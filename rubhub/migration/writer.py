"""
Per-row writes into the target store.

Every row is committed on its own so that one bad row can be rolled back
without losing the rows written before it.
"""
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from rubhub.database import Base
from rubhub.migration.errors import DuplicateRecordError, RecordInsertError, TargetConnectionError
from rubhub.utils.db_compat import is_connection_error, is_unique_violation


class RowWriter:
    """Insert one ORM object at a time and classify failures"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def insert(self, record: Base, context: str = "") -> Base:
        """
        Add and commit a single record.

        Raises DuplicateRecordError on a unique-constraint conflict,
        TargetConnectionError when the connection is lost, and
        RecordInsertError for any other store error.
        """
        self.session.add(record)
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            if is_unique_violation(e):
                raise DuplicateRecordError(str(e.orig), context) from e
            raise RecordInsertError(str(e.orig), context) from e
        except SQLAlchemyError as e:
            if is_connection_error(e):
                raise TargetConnectionError(f"{context}: {e}") from e
            await self.session.rollback()
            raise RecordInsertError(str(e), context) from e

        # Detached copies keep their loaded ids; the identity map stays empty
        self.session.expunge(record)
        return record
