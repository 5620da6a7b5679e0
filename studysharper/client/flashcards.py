"""
Client HTTP des flashcards, utilisé côté UI pour parler au proxy (même origine).

Deux familles d'opérations:
- avec retry (`generate_flashcards`, `get_flashcard_sets`, suggestions) :
  renvoient un `ApiResult`, jamais d'exception pour un échec backend/réseau
- directes (création, mise à jour, suppression, révision, chat) :
  renvoient le payload typé ou lèvent `ApiError`
"""

import logging
import time
from typing import Any, Callable, List, Optional

import httpx
from pydantic import TypeAdapter

from studysharper.client.auth import TokenProvider, auth_headers
from studysharper.client.cancel import CancelToken
from studysharper.client.retry import RetryOptions, retry_api_call
from studysharper.core.config import get_settings
from studysharper.core.errors import ApiError, RequestAborted
from studysharper.models.flashcards import (
    AIChatMessage,
    AIChatResponse,
    ApiResult,
    CreateFlashcardSetRequest,
    CreateFlashcardSetResponse,
    Flashcard,
    FlashcardSet,
    GenerateFlashcardsRequest,
    RecordReviewRequest,
    SuccessResponse,
    SuggestionsResponse,
)

logger = logging.getLogger(__name__)

_SETS = TypeAdapter(List[FlashcardSet])
_CARDS = TypeAdapter(List[Flashcard])


def _error_message(response: httpx.Response, fallback: str) -> str:
    try:
        payload = response.json()
    except ValueError:
        return fallback
    if isinstance(payload, dict):
        message = payload.get("error")
        if isinstance(message, str) and message:
            return message
    return fallback


def _without_none(payload: dict) -> dict:
    return {k: v for k, v in payload.items() if v is not None}


class FlashcardsClient:
    def __init__(
        self,
        token_provider: Optional[TokenProvider] = None,
        *,
        base_url: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        cookies: Optional[dict] = None,
    ):
        self.token_provider = token_provider
        if http_client is None:
            # les cookies de session sont toujours envoyés (jar du client)
            http_client = httpx.AsyncClient(
                base_url=base_url or get_settings().CLIENT_BASE_URL,
                cookies=cookies,
            )
        self.http = http_client

    async def aclose(self) -> None:
        await self.http.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()

    # =========================================================
    # Transport
    # =========================================================
    async def fetch_with_auth(
        self,
        method: str,
        url: str,
        *,
        json: Any = None,
        params: Optional[dict] = None,
        cancel: Optional[CancelToken] = None,
    ) -> httpx.Response:
        headers = await auth_headers(self.token_provider)
        send = self.http.request(method, url, headers=headers, json=json, params=params)
        if cancel is not None:
            return await cancel.guard(send)
        return await send

    async def _result_call(
        self,
        method: str,
        url: str,
        parse: Callable[[Any], Any],
        fallback: str,
        *,
        json: Any = None,
        params: Optional[dict] = None,
    ) -> ApiResult:
        response = await self.fetch_with_auth(method, url, json=json, params=params)
        if not response.is_success:
            return ApiResult.failure(response.status_code, _error_message(response, fallback))
        return ApiResult.success(response.status_code, parse(response.json()))

    async def _direct_call(
        self,
        method: str,
        url: str,
        parse: Callable[[Any], Any],
        fallback: str,
        *,
        json: Any = None,
        cancel: Optional[CancelToken] = None,
    ):
        try:
            response = await self.fetch_with_auth(method, url, json=json, cancel=cancel)
        except RequestAborted:
            raise
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %s", method, url, e)
            raise ApiError(fallback) from e

        if not response.is_success:
            raise ApiError(_error_message(response, fallback), response.status_code)

        try:
            return parse(response.json())
        except ValueError as e:
            raise ApiError(fallback, response.status_code) from e

    # =========================================================
    # Opérations avec retry
    # =========================================================
    async def generate_flashcards(
        self,
        request: GenerateFlashcardsRequest,
        retry_options: Optional[RetryOptions] = None,
    ) -> ApiResult:
        """Génère un set de flashcards à partir de notes (IA)."""
        return await retry_api_call(
            lambda: self._result_call(
                "POST", "/api/flashcards/generate",
                FlashcardSet.model_validate, "Failed to generate flashcards",
                json=request.model_dump(exclude_none=True),
            ),
            retry_options,
        )

    async def get_flashcard_sets(
        self,
        cancel: Optional[CancelToken] = None,
        retry_options: Optional[RetryOptions] = None,
    ) -> ApiResult:
        """Tous les sets de l'utilisateur courant."""
        return await retry_api_call(
            lambda: self._result_call(
                "GET", "/api/flashcards/sets",
                _SETS.validate_python, "Failed to fetch flashcard sets",
                # cache-busting: horodatage à chaque tentative
                params={"t": int(time.time() * 1000)},
            ),
            retry_options,
            cancel,
        )

    async def generate_suggested_flashcards(
        self,
        retry_options: Optional[RetryOptions] = None,
    ) -> ApiResult:
        return await retry_api_call(
            lambda: self._result_call(
                "POST", "/api/flashcards/suggest",
                SuggestionsResponse.model_validate, "Failed to generate suggestions",
            ),
            retry_options,
        )

    async def get_suggested_flashcards(
        self,
        cancel: Optional[CancelToken] = None,
        retry_options: Optional[RetryOptions] = None,
    ) -> ApiResult:
        return await retry_api_call(
            lambda: self._result_call(
                "GET", "/api/flashcards/suggest",
                SuggestionsResponse.model_validate, "Failed to fetch suggestions",
            ),
            retry_options,
            cancel,
        )

    # =========================================================
    # Sets
    # =========================================================
    async def create_blank_flashcard_set(self, request: CreateFlashcardSetRequest) -> CreateFlashcardSetResponse:
        """Crée un set vide pour une saisie manuelle des cartes."""
        return await self._direct_call(
            "POST", "/api/flashcards/sets/create",
            CreateFlashcardSetResponse.model_validate, "Failed to create flashcard set",
            json=request.model_dump(exclude_none=True),
        )

    async def delete_flashcard_set(self, set_id: str) -> SuccessResponse:
        return await self._direct_call(
            "DELETE", f"/api/flashcards/sets/{set_id}",
            SuccessResponse.model_validate, "Failed to delete flashcard set",
        )

    async def get_flashcards_in_set(self, set_id: str, cancel: Optional[CancelToken] = None) -> List[Flashcard]:
        return await self._direct_call(
            "GET", f"/api/flashcards/sets/{set_id}/cards",
            _CARDS.validate_python, "Failed to fetch flashcards",
            cancel=cancel,
        )

    # =========================================================
    # Cards
    # =========================================================
    async def create_manual_flashcard(
        self,
        set_id: str,
        front: str,
        back: str,
        explanation: Optional[str] = None,
    ) -> Flashcard:
        return await self._direct_call(
            "POST", "/api/flashcards",
            Flashcard.model_validate, "Failed to create flashcard",
            json=_without_none({"set_id": set_id, "front": front, "back": back, "explanation": explanation}),
        )

    async def update_flashcard(
        self,
        flashcard_id: str,
        front: Optional[str] = None,
        back: Optional[str] = None,
        explanation: Optional[str] = None,
    ) -> Flashcard:
        return await self._direct_call(
            "PUT", "/api/flashcards",
            Flashcard.model_validate, "Failed to update flashcard",
            json=_without_none({"id": flashcard_id, "front": front, "back": back, "explanation": explanation}),
        )

    async def delete_flashcard(self, flashcard_id: str) -> SuccessResponse:
        return await self._direct_call(
            "DELETE", "/api/flashcards",
            SuccessResponse.model_validate, "Failed to delete flashcard",
            json={"id": flashcard_id},
        )

    # =========================================================
    # Révisions / chat
    # =========================================================
    async def record_flashcard_review(self, request: RecordReviewRequest) -> Flashcard:
        return await self._direct_call(
            "POST", "/api/flashcards/review",
            Flashcard.model_validate, "Failed to record review",
            json=request.model_dump(exclude_none=True),
        )

    async def send_flashcard_chat_message(self, message: AIChatMessage) -> AIChatResponse:
        return await self._direct_call(
            "POST", "/api/flashcards/chat",
            AIChatResponse.model_validate, "Chat request failed",
            json=message.model_dump(),
        )
