import logging
from typing import Any, Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, Request
from starlette.status import HTTP_400_BAD_REQUEST, HTTP_500_INTERNAL_SERVER_ERROR

from studysharper.core.deps import get_backend_proxy
from studysharper.services.backend import BackendProxy, INTERNAL_ERROR, error_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/flashcards", tags=["flashcards"])

ID_REQUIRED = "Flashcard ID is required"


def _flashcard_id(body: Any) -> Optional[str]:
    if not isinstance(body, dict):
        return None
    value = body.get("id")
    # bool est un int: exclu, comme 0 et ""
    if isinstance(value, bool) or not isinstance(value, (str, int)) or not value:
        return None
    return str(value)


@router.post("")
async def create_flashcard(request: Request, proxy: BackendProxy = Depends(get_backend_proxy)):
    try:
        body = await request.json()
        return await proxy.forward(
            "POST",
            "/api/flashcards",
            authorization=request.headers.get("authorization"),
            body=body,
            fallback_error="Failed to create flashcard",
        )
    except Exception:
        logger.exception("Error creating flashcard")
        return error_response(INTERNAL_ERROR, HTTP_500_INTERNAL_SERVER_ERROR)


@router.put("")
async def update_flashcard(request: Request, proxy: BackendProxy = Depends(get_backend_proxy)):
    try:
        body = await request.json()
        flashcard_id = _flashcard_id(body)
        if not flashcard_id:
            return error_response(ID_REQUIRED, HTTP_400_BAD_REQUEST)

        return await proxy.forward(
            "PUT",
            f"/api/flashcards/{quote(flashcard_id, safe='')}",
            authorization=request.headers.get("authorization"),
            body=body,
            fallback_error="Failed to update flashcard",
        )
    except Exception:
        logger.exception("Error updating flashcard")
        return error_response(INTERNAL_ERROR, HTTP_500_INTERNAL_SERVER_ERROR)


@router.delete("")
async def delete_flashcard(request: Request, proxy: BackendProxy = Depends(get_backend_proxy)):
    try:
        body = await request.json()
        flashcard_id = _flashcard_id(body)
        if not flashcard_id:
            return error_response(ID_REQUIRED, HTTP_400_BAD_REQUEST)

        # l'id part dans l'URL, pas de corps vers le backend
        return await proxy.forward(
            "DELETE",
            f"/api/flashcards/{quote(flashcard_id, safe='')}",
            authorization=request.headers.get("authorization"),
            fallback_error="Failed to delete flashcard",
        )
    except Exception:
        logger.exception("Error deleting flashcard")
        return error_response(INTERNAL_ERROR, HTTP_500_INTERNAL_SERVER_ERROR)
