"""
Composition d'un nouveau set de flashcards, avant tout appel réseau.

États: EDITING -> SAVING -> SAVED (navigation après un court délai)
        SAVING -> EDITING en cas d'échec (message dans `error`)

Les cartes créées avant un échec restent côté backend (pas de rollback).
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

from studysharper.core.config import get_settings
from studysharper.core.errors import ApiError
from studysharper.models.flashcards import CreateFlashcardSetRequest

logger = logging.getLogger(__name__)

SETS_ROUTE = "/study/flashcards"

TITLE_REQUIRED = "Title is required"
AT_LEAST_ONE_CARD = "You must have at least one card"
NO_VALID_CARD = "At least one card must have both a term and definition"
CREATE_FAILED = "Failed to create flashcard set"

CARD_FIELDS = ("front", "back", "explanation")


class SetCreationState(str, Enum):
    editing = "editing"
    saving = "saving"
    saved = "saved"


@dataclass
class DraftCard:
    id: str
    front: str = ""
    back: str = ""
    explanation: str = ""

    @property
    def is_filled(self) -> bool:
        return bool(self.front.strip() and self.back.strip())


def _new_card_id() -> str:
    return uuid.uuid4().hex[:9]


def _log_navigation_failure(task: asyncio.Task) -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error("Navigation after set creation failed", exc_info=exc)


class SetCreationWorkflow:
    def __init__(
        self,
        client,
        navigate: Optional[Callable[[str], None]] = None,
        redirect_delay: Optional[float] = None,
    ):
        self.client = client
        self.navigate = navigate
        self.redirect_delay = (
            get_settings().REDIRECT_DELAY_SECONDS if redirect_delay is None else redirect_delay
        )

        self.title = ""
        self.description = ""
        self.cards: List[DraftCard] = [DraftCard(id="1")]
        self.state = SetCreationState.editing
        self.error: Optional[str] = None
        self.success_message: Optional[str] = None
        self.created_set_id: Optional[str] = None
        self.navigation_task: Optional[asyncio.Task] = None

    @property
    def is_saving(self) -> bool:
        return self.state == SetCreationState.saving

    @property
    def filled_count(self) -> int:
        return sum(1 for c in self.cards if c.is_filled)

    # =========================================================
    # Liste de cartes
    # =========================================================
    def add_card(self) -> DraftCard:
        card = DraftCard(id=_new_card_id())
        self.cards.append(card)
        return card

    def delete_card(self, card_id: str) -> bool:
        if len(self.cards) == 1:
            self.error = AT_LEAST_ONE_CARD
            return False
        self.cards = [c for c in self.cards if c.id != card_id]
        return True

    def update_card(self, card_id: str, field: str, value: str) -> None:
        if field not in CARD_FIELDS:
            raise ValueError(f"Unknown card field: {field}")
        for card in self.cards:
            if card.id == card_id:
                setattr(card, field, value)

    def move_card(self, from_index: int, to_index: int) -> None:
        # hors bornes: no-op
        if not (0 <= from_index < len(self.cards)) or not (0 <= to_index < len(self.cards)):
            return
        card = self.cards.pop(from_index)
        self.cards.insert(to_index, card)

    def move_up(self, index: int) -> None:
        self.move_card(index, index - 1)

    def move_down(self, index: int) -> None:
        self.move_card(index, index + 1)

    def valid_cards(self) -> List[DraftCard]:
        return [c for c in self.cards if c.is_filled]

    # =========================================================
    # Validation / soumission
    # =========================================================
    def validate(self) -> bool:
        self.error = None

        if not self.title.strip():
            self.error = TITLE_REQUIRED
            return False

        if not self.cards:
            self.error = AT_LEAST_ONE_CARD
            return False

        if not self.valid_cards():
            self.error = NO_VALID_CARD
            return False

        return True

    async def submit(self, and_practice: bool = False) -> bool:
        """
        Crée le set puis chaque carte valide, dans l'ordre, une par une.
        Renvoie True si tout a été créé; l'erreur éventuelle est dans `self.error`.
        Ignoré hors de l'état EDITING (double clic, set déjà créé).
        """
        if self.state != SetCreationState.editing:
            return False
        if not self.validate():
            return False

        self.state = SetCreationState.saving
        self.error = None
        self.success_message = None

        title = self.title.strip()
        try:
            created = await self.client.create_blank_flashcard_set(
                CreateFlashcardSetRequest(
                    title=title,
                    description=self.description.strip() or None,
                )
            )
            set_id = created.set.id
            self.created_set_id = set_id

            valid = self.valid_cards()
            for card in valid:
                await self.client.create_manual_flashcard(
                    set_id,
                    card.front.strip(),
                    card.back.strip(),
                    card.explanation.strip() or None,
                )
        except ApiError as e:
            logger.warning("Failed to create flashcards: %s", e)
            self.error = e.message or CREATE_FAILED
            self.state = SetCreationState.editing
            return False

        plural = "" if len(valid) == 1 else "s"
        self.success_message = f'Created "{title}" with {len(valid)} card{plural}!'
        self.state = SetCreationState.saved

        destination = f"{SETS_ROUTE}/{set_id}" if and_practice else SETS_ROUTE
        self.navigation_task = asyncio.ensure_future(self._navigate_later(destination))
        self.navigation_task.add_done_callback(_log_navigation_failure)
        return True

    async def _navigate_later(self, destination: str) -> str:
        await asyncio.sleep(self.redirect_delay)
        if self.navigate is not None:
            self.navigate(destination)
        return destination
