"""
Base service layer for SQLite-backed resources
"""

import logging
from typing import Dict, Any, List, Optional, Sequence, Tuple
from dataclasses import dataclass

import aiosqlite

logger = logging.getLogger(__name__)


@dataclass
class ServiceResult:
    """Result from service operation"""
    success: bool
    data: Optional[List[Any]] = None
    count: int = 0
    error: Optional[str] = None
    error_type: Optional[str] = None


class ServiceError(Exception):
    """Store-level failure tagged with the error type reported to the caller"""

    def __init__(self, error_type: str, message: str):
        super().__init__(message)
        self.error_type = error_type
        self.message = message


class BaseService:
    """Wraps a shared aiosqlite connection with error-typed execution helpers"""

    def __init__(self, conn: aiosqlite.Connection, resource_name: str):
        if conn is None:
            raise RuntimeError("Database connection not initialized")
        self.conn = conn
        self.resource_name = resource_name

    @staticmethod
    def failure(error_type: str, error: str) -> ServiceResult:
        return ServiceResult(success=False, error=error, error_type=error_type)

    async def _fetch_all(self, query: str, params: Sequence[Any], error_type: str) -> List[Dict[str, Any]]:
        """Run a SELECT and return every row as a dict"""
        logger.debug(f"Executing query on {self.resource_name}: {query} {list(params)}")
        try:
            async with self.conn.execute(query, params) as cursor:
                rows = await cursor.fetchall()
        except aiosqlite.Error as e:
            logger.error(f"Query failed for {self.resource_name}: {e}", exc_info=True)
            raise ServiceError(error_type, f"Database query failed: {e}") from e
        return [dict(row) for row in rows]

    async def _fetch_one(self, query: str, params: Sequence[Any], error_type: str) -> Dict[str, Any]:
        """Run a SELECT expected to match exactly one row"""
        rows = await self._fetch_all(query, params, error_type)
        if not rows:
            raise ServiceError(error_type, f"No {self.resource_name} row matched {list(params)}")
        return rows[0]

    async def _execute(self, query: str, params: Sequence[Any], error_type: str) -> Tuple[Optional[int], int]:
        """Run a write statement and return (lastrowid, rowcount); the connection autocommits"""
        logger.debug(f"Executing statement on {self.resource_name}: {query} {list(params)}")
        try:
            cursor = await self.conn.execute(query, params)
            lastrowid, rowcount = cursor.lastrowid, cursor.rowcount
            await cursor.close()
        except aiosqlite.Error as e:
            logger.error(f"Statement failed for {self.resource_name}: {e}", exc_info=True)
            raise ServiceError(error_type, f"Database statement failed: {e}") from e
        return lastrowid, rowcount
