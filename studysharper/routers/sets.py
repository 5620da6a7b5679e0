import logging

from fastapi import APIRouter, Depends, Request

from studysharper.core.deps import get_backend_proxy
from studysharper.services.backend import BackendProxy

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/flashcards/sets", tags=["flashcard-sets"])


@router.get("")
async def list_flashcard_sets(request: Request, proxy: BackendProxy = Depends(get_backend_proxy)):
    # Toujours évalué à la demande: jamais de réponse mise en cache
    logger.info("GET /api/flashcards/sets (auth header present: %s)", "authorization" in request.headers)
    response = await proxy.pass_through(
        request, "GET", "/api/flashcards/sets",
        fallback_error="Failed to fetch flashcard sets",
    )
    response.headers["Cache-Control"] = "no-store"
    logger.info("GET /api/flashcards/sets -> %s", response.status_code)
    return response


@router.post("/create")
async def create_flashcard_set(request: Request, proxy: BackendProxy = Depends(get_backend_proxy)):
    return await proxy.pass_through(
        request, "POST", "/api/flashcards/sets/create",
        fallback_error="Failed to create flashcard set",
        with_body=True,
    )


@router.delete("/{set_id}")
async def delete_flashcard_set(set_id: str, request: Request, proxy: BackendProxy = Depends(get_backend_proxy)):
    return await proxy.pass_through(
        request, "DELETE", f"/api/flashcards/sets/{set_id}",
        fallback_error="Failed to delete flashcard set",
    )


@router.get("/{set_id}/cards")
async def list_cards_in_set(set_id: str, request: Request, proxy: BackendProxy = Depends(get_backend_proxy)):
    return await proxy.pass_through(
        request, "GET", f"/api/flashcards/sets/{set_id}/cards",
        fallback_error="Failed to fetch flashcards",
    )
