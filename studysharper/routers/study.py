from fastapi import APIRouter, Depends, Request

from studysharper.core.deps import get_backend_proxy
from studysharper.services.backend import BackendProxy

router = APIRouter(prefix="/api/flashcards", tags=["study"])


# =========================================================
# Génération IA
# =========================================================
@router.post("/generate")
async def generate_flashcards(request: Request, proxy: BackendProxy = Depends(get_backend_proxy)):
    return await proxy.pass_through(
        request, "POST", "/api/flashcards/generate",
        fallback_error="Failed to generate flashcards",
        with_body=True,
    )


@router.post("/chat")
async def flashcard_chat(request: Request, proxy: BackendProxy = Depends(get_backend_proxy)):
    return await proxy.pass_through(
        request, "POST", "/api/flashcards/chat",
        fallback_error="Chat request failed",
        with_body=True,
    )


# =========================================================
# Révisions
# =========================================================
@router.post("/review")
async def record_review(request: Request, proxy: BackendProxy = Depends(get_backend_proxy)):
    return await proxy.pass_through(
        request, "POST", "/api/flashcards/review",
        fallback_error="Failed to record review",
        with_body=True,
    )


# =========================================================
# Suggestions
# =========================================================
@router.get("/suggest")
async def get_suggestions(request: Request, proxy: BackendProxy = Depends(get_backend_proxy)):
    return await proxy.pass_through(
        request, "GET", "/api/flashcards/suggest",
        fallback_error="Failed to fetch suggestions",
    )


@router.post("/suggest")
async def generate_suggestions(request: Request, proxy: BackendProxy = Depends(get_backend_proxy)):
    # le client n'envoie pas de corps ici
    return await proxy.pass_through(
        request, "POST", "/api/flashcards/suggest",
        fallback_error="Failed to generate suggestions",
    )
