import asyncio
import inspect
from typing import Awaitable, Optional, TypeVar

from studysharper.core.errors import RequestAborted

T = TypeVar("T")


class CancelToken:
    """
    Signal d'annulation partagé par une requête et toutes ses tentatives.

    - `guard(coro)` : exécute la requête, l'interrompt dès que `cancel()` est appelé
    - `sleep(delay)` : attente de backoff interrompue par l'annulation
    """

    def __init__(self):
        self._event = asyncio.Event()
        self.reason: Optional[str] = None

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self, reason: str = "Request aborted") -> None:
        if not self._event.is_set():
            self.reason = reason
            self._event.set()

    def raise_if_cancelled(self) -> None:
        if self.cancelled:
            raise RequestAborted(self.reason or "Request aborted")

    async def guard(self, awaitable: Awaitable[T]) -> T:
        if self.cancelled:
            if inspect.iscoroutine(awaitable):
                awaitable.close()
            self.raise_if_cancelled()

        task = asyncio.ensure_future(awaitable)
        waiter = asyncio.ensure_future(self._event.wait())
        try:
            done, _ = await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            waiter.cancel()
            if not task.done():
                task.cancel()

        if task in done:
            return task.result()

        # annulé pendant la requête: on attend la fin propre de la tâche
        await asyncio.gather(task, return_exceptions=True)
        raise RequestAborted(self.reason or "Request aborted")

    async def sleep(self, delay: float) -> None:
        try:
            await asyncio.wait_for(self._event.wait(), timeout=delay)
        except asyncio.TimeoutError:
            return
        raise RequestAborted(self.reason or "Request aborted")
