"""
Suggestions service - business logic for the suggestion box
"""

import logging
from typing import Dict, Any, List, Optional

import aiosqlite
from fastapi import Depends
from pydantic import ValidationError

from config.settings import PLACEHOLDER_NAME
from database.connection import TIMESTAMP_SQL, get_db_connection
from models.suggestion import Suggestion
from services.base_service import BaseService, ServiceError, ServiceResult

logger = logging.getLogger(__name__)

SELECT_COLUMNS = "SELECT id, name, suggestion, created_at, updated_at FROM suggestions"


def normalize_name(name: Optional[str]) -> str:
    """Trim the author name, falling back to the placeholder when nothing is left"""
    name = (name or "").strip()
    return name or PLACEHOLDER_NAME


def normalize_suggestion(suggestion: Optional[str]) -> str:
    return (suggestion or "").strip()


class SuggestionsService(BaseService):
    """Service for suggestion CRUD operations"""

    def __init__(self, conn: aiosqlite.Connection):
        super().__init__(conn, "suggestions")

    async def list_suggestions(self) -> ServiceResult:
        """
        Get every suggestion, newest first

        Returns:
            ServiceResult whose data is a list of Suggestion (empty when the table is)
        """
        try:
            rows = await self._fetch_all(
                f"{SELECT_COLUMNS} ORDER BY created_at DESC, id DESC", (), "QUERY_ERROR"
            )
            suggestions = [self._to_suggestion(row) for row in rows]
        except ServiceError as e:
            return self.failure(e.error_type, e.message)

        return ServiceResult(success=True, data=suggestions, count=len(suggestions))

    async def get_suggestion(self, suggestion_id: int) -> ServiceResult:
        """Get a single suggestion by id; a missing row is a FETCH_ERROR"""
        try:
            row = await self._fetch_one(f"{SELECT_COLUMNS} WHERE id = ?", (suggestion_id,), "FETCH_ERROR")
            suggestion = self._to_suggestion(row, error_type="FETCH_ERROR")
        except ServiceError as e:
            return self.failure(e.error_type, e.message)

        return ServiceResult(success=True, data=[suggestion], count=1)

    async def create_suggestion(self, name: Optional[str], suggestion: Optional[str]) -> ServiceResult:
        """
        Create a new suggestion

        Args:
            name: Author label; blank or missing becomes the placeholder
            suggestion: Suggestion text; required after trimming

        Returns:
            ServiceResult with the stored row as re-read from the database
        """
        name = normalize_name(name)
        suggestion = normalize_suggestion(suggestion)
        if not suggestion:
            return self.failure("VALIDATION_ERROR", "suggestion required")

        logger.info(f"Creating new suggestion from: {name}")
        try:
            new_id, _ = await self._execute(
                "INSERT INTO suggestions (name, suggestion) VALUES (?, ?)",
                (name, suggestion),
                "INSERT_ERROR",
            )
        except ServiceError as e:
            return self.failure(e.error_type, e.message)

        return await self.get_suggestion(new_id)

    async def update_suggestion(
        self,
        suggestion_id: int,
        name: Optional[str] = None,
        suggestion: Optional[str] = None
    ) -> ServiceResult:
        """
        Update the fields that were provided and refresh updated_at

        None means "not provided". A provided name is trimmed and defaulted to
        the placeholder; a provided suggestion must not be blank.
        """
        updates: Dict[str, Any] = {}
        if name is not None:
            updates["name"] = normalize_name(name)
        if suggestion is not None:
            updates["suggestion"] = normalize_suggestion(suggestion)
            if not updates["suggestion"]:
                return self.failure("VALIDATION_ERROR", "suggestion required")

        if not updates:
            return self.failure("VALIDATION_ERROR", "no fields to update")

        assignments: List[str] = [f"{field} = ?" for field in updates]
        assignments.append(f"updated_at = {TIMESTAMP_SQL}")
        query = f"UPDATE suggestions SET {', '.join(assignments)} WHERE id = ?"
        params = [*updates.values(), suggestion_id]

        try:
            _, rowcount = await self._execute(query, params, "UPDATE_ERROR")
        except ServiceError as e:
            return self.failure(e.error_type, e.message)

        if rowcount == 0:
            return self.failure("NOT_FOUND", "suggestion not found")

        logger.info(f"Updated suggestion {suggestion_id}: {', '.join(updates)}")
        return await self.get_suggestion(suggestion_id)

    async def delete_suggestion(self, suggestion_id: int) -> ServiceResult:
        """Hard-delete a suggestion; deleting a missing id still succeeds"""
        try:
            _, rowcount = await self._execute(
                "DELETE FROM suggestions WHERE id = ?", (suggestion_id,), "DELETE_ERROR"
            )
        except ServiceError as e:
            return self.failure(e.error_type, e.message)

        logger.info(f"Deleted suggestion {suggestion_id} ({rowcount} row(s) removed)")
        return ServiceResult(success=True, count=rowcount)

    def _to_suggestion(self, row: Dict[str, Any], error_type: str = "SCAN_ERROR") -> Suggestion:
        try:
            return Suggestion.model_validate(row)
        except ValidationError as e:
            logger.error(f"Malformed {self.resource_name} row {row.get('id')}: {e}")
            raise ServiceError(error_type, f"Cannot map row: {e}") from e


def get_suggestions_service(
    conn: aiosqlite.Connection = Depends(get_db_connection)
) -> SuggestionsService:
    """FastAPI dependency building a service around the injected connection"""
    return SuggestionsService(conn)
