from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Optional, Tuple

from studysharper.core.errors import ApiError
from studysharper.models.flashcards import Flashcard

logger = logging.getLogger(__name__)

FIELDS_REQUIRED = "Front and back are required"
UPDATE_FAILED = "Failed to update card"


class DialogState(str, Enum):
    closed = "closed"
    editing = "editing"
    submitting = "submitting"


class CardEditDialog:
    """
    Dialogue d'édition d'une carte existante.

    Les champs locaux sont resynchronisés quand la carte affichée change
    (autre id, ou front/back modifiés côté appelant), pas à chaque saisie.
    """

    def __init__(
        self,
        client,
        on_success: Optional[Callable[[Flashcard], None]] = None,
        on_close: Optional[Callable[[], None]] = None,
    ):
        self.client = client
        self.on_success = on_success
        self.on_close = on_close

        self.state = DialogState.closed
        self.card: Optional[Flashcard] = None
        self.front = ""
        self.back = ""
        self.explanation = ""
        self.error: Optional[str] = None
        self._synced: Optional[Tuple[str, str, str]] = None

    @property
    def is_open(self) -> bool:
        return self.state != DialogState.closed

    @property
    def is_updating(self) -> bool:
        return self.state == DialogState.submitting

    def open(self, card: Flashcard) -> None:
        self.error = None
        self.show(card)
        self.state = DialogState.editing

    def show(self, card: Optional[Flashcard]) -> None:
        self.card = card
        if card is None:
            return
        snapshot = (card.id, card.front, card.back)
        if snapshot != self._synced:
            self.front = card.front
            self.back = card.back
            self.explanation = card.explanation or ""
            self._synced = snapshot

    def close(self) -> bool:
        if self.is_updating:
            return False
        self.state = DialogState.closed
        # la prochaine ouverture repart de la carte, pas des saisies abandonnées
        self._synced = None
        if self.on_close is not None:
            self.on_close()
        return True

    async def submit(self) -> Optional[Flashcard]:
        if self.state != DialogState.editing:
            return None

        if not self.front.strip() or not self.back.strip():
            self.error = FIELDS_REQUIRED
            return None

        if self.card is None:
            return None

        self.state = DialogState.submitting
        self.error = None
        try:
            updated = await self.client.update_flashcard(
                self.card.id,
                self.front.strip(),
                self.back.strip(),
                self.explanation.strip() or None,
            )
        except ApiError as e:
            logger.warning("Failed to update flashcard %s: %s", self.card.id, e)
            self.error = e.message or UPDATE_FAILED
            self.state = DialogState.editing
            return None

        self.state = DialogState.editing
        if self.on_success is not None:
            self.on_success(updated)
        self.show(updated)
        self.close()
        return updated
