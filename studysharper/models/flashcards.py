from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class BackendModel(BaseModel):
    # Le backend est opaque: on garde les champs inconnus (métadonnées de révision, etc.)
    model_config = ConfigDict(extra="allow")


# -------------------
# Sets
# -------------------
class FlashcardSet(BackendModel):
    id: str
    title: str
    description: Optional[str] = None
    total_cards: Optional[int] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class CreateFlashcardSetRequest(BaseModel):
    title: str
    description: Optional[str] = None


class CreateFlashcardSetResponse(BackendModel):
    success: bool = True
    set: FlashcardSet


# -------------------
# Cards
# -------------------
class Flashcard(BackendModel):
    id: str
    set_id: str
    front: str
    back: str
    explanation: Optional[str] = None


class SuccessResponse(BackendModel):
    success: bool


# -------------------
# Review
# -------------------
class RecordReviewRequest(BaseModel):
    flashcard_id: str
    was_correct: bool
    confidence_level: Optional[int] = None
    time_spent_seconds: Optional[int] = None


# -------------------
# Génération IA / suggestions / chat
# -------------------
class GenerateFlashcardsRequest(BaseModel):
    note_ids: List[str] = Field(default_factory=list)
    num_cards: int = 10
    difficulty: str = "medium"
    title: Optional[str] = None


class SuggestedFlashcardSet(BackendModel):
    id: str
    title: str
    description: Optional[str] = None
    card_count: Optional[int] = None


class SuggestionsResponse(BackendModel):
    suggestions: List[SuggestedFlashcardSet] = Field(default_factory=list)
    count: int = 0


class AIChatMessage(BaseModel):
    message: str
    conversation_history: List[dict] = Field(default_factory=list)


class AIChatResponse(BackendModel):
    response: str
    flashcards: Optional[List[dict]] = None


# -------------------
# Résultat discriminé (opérations avec retry)
# -------------------
class ApiResult(BaseModel, Generic[T]):
    ok: bool
    status: int
    data: Optional[T] = None
    error: Optional[str] = None

    @classmethod
    def success(cls, status: int, data):
        return cls(ok=True, status=status, data=data)

    @classmethod
    def failure(cls, status: int, error: str):
        return cls(ok=False, status=status, data=None, error=error)
