"""
Suggestion box API routes
Collection endpoint: /api/suggestions
Item endpoint:       /api/suggestions/{id}
"""

import logging
import re
from fastapi import APIRouter, HTTPException, Depends, Response

from models.suggestion import SuggestionCreateRequest, SuggestionUpdateRequest
from services.base_service import ServiceResult
from services.suggestions_service import SuggestionsService, get_suggestions_service
from utils.responses import respond_json

router = APIRouter()
logger = logging.getLogger(__name__)

# Generic messages returned for store failures; details only go to the log
SERVER_ERROR_MESSAGES = {
    "QUERY_ERROR": "query error",
    "SCAN_ERROR": "scan error",
    "INSERT_ERROR": "insert error",
    "FETCH_ERROR": "fetch error",
    "UPDATE_ERROR": "update error",
    "DELETE_ERROR": "delete error",
}


SUGGESTION_ID_PATTERN = re.compile(r"\+?[0-9]+")
MAX_SUGGESTION_ID = 2**63 - 1  # SQLite INTEGER range


def valid_suggestion_id(suggestion_id: str) -> int:
    """Path dependency: the trailing segment must be a positive integer id"""
    if not SUGGESTION_ID_PATTERN.fullmatch(suggestion_id):
        raise HTTPException(status_code=400, detail="invalid id")
    value = int(suggestion_id)
    if value <= 0 or value > MAX_SUGGESTION_ID:
        raise HTTPException(status_code=400, detail="invalid id")
    return value


def raise_for_result(result: ServiceResult) -> None:
    """Translate a failed ServiceResult into the matching HTTPException"""
    if result.success:
        return
    if result.error_type == "VALIDATION_ERROR":
        raise HTTPException(status_code=400, detail=result.error)
    if result.error_type == "NOT_FOUND":
        raise HTTPException(status_code=404, detail=result.error)

    logger.error(f"Suggestion operation failed ({result.error_type}): {result.error}")
    raise HTTPException(status_code=500, detail=SERVER_ERROR_MESSAGES.get(result.error_type, "internal server error"))


def method_not_allowed() -> None:
    raise HTTPException(status_code=405, detail="method not allowed")


@router.get("")
async def list_suggestions(
    service: SuggestionsService = Depends(get_suggestions_service)
):
    """List all suggestions, newest first"""
    result = await service.list_suggestions()
    raise_for_result(result)
    return respond_json(result.data)


@router.post("")
async def create_suggestion(
    request: SuggestionCreateRequest,
    service: SuggestionsService = Depends(get_suggestions_service)
):
    """Create a new suggestion"""
    result = await service.create_suggestion(name=request.name, suggestion=request.suggestion)
    raise_for_result(result)
    return respond_json(result.data[0])


@router.api_route("", methods=["PUT", "PATCH", "DELETE", "OPTIONS"], include_in_schema=False)
async def suggestions_collection_fallback():
    method_not_allowed()


@router.api_route("/{suggestion_id:path}", methods=["PUT", "PATCH"])
async def update_suggestion(
    request: SuggestionUpdateRequest,
    suggestion_id: int = Depends(valid_suggestion_id),
    service: SuggestionsService = Depends(get_suggestions_service)
):
    """Update the provided fields of a suggestion"""
    result = await service.update_suggestion(
        suggestion_id,
        name=request.name,
        suggestion=request.suggestion
    )
    raise_for_result(result)
    return respond_json(result.data[0])


@router.delete("/{suggestion_id:path}", status_code=204)
async def delete_suggestion(
    suggestion_id: int = Depends(valid_suggestion_id),
    service: SuggestionsService = Depends(get_suggestions_service)
):
    """Delete a suggestion; deleting an id that does not exist is not an error"""
    result = await service.delete_suggestion(suggestion_id)
    raise_for_result(result)
    return Response(status_code=204)


@router.api_route("/{suggestion_id:path}", methods=["GET", "POST", "OPTIONS"], include_in_schema=False)
async def suggestion_item_fallback(
    suggestion_id: int = Depends(valid_suggestion_id)
):
    method_not_allowed()
