"""
Base repository over an async SQLAlchemy session.

Repositories never hold state beyond the session they were given; storage
errors surface as `DatabaseError`.
"""

import logging
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from pg_reporting.core.exceptions import DatabaseError

logger = logging.getLogger(__name__)


class BaseRepository:
    """Shared session handling and error translation."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _execute(self, statement: Any, operation: str):
        try:
            return await self.db.execute(statement)
        except SQLAlchemyError as e:
            logger.error(f"Database error during {operation}: {str(e)}", exc_info=True)
            raise DatabaseError(
                f"Failed to {operation}",
                details={"error": str(e)},
            ) from e

    async def commit(self) -> None:
        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise DatabaseError(f"Commit failed: {str(e)}") from e

    async def rollback(self) -> None:
        await self.db.rollback()
