"""
Retry avec backoff exponentiel pour les opérations qui renvoient un `ApiResult`.

Une tentative échoue si elle renvoie `ApiResult(ok=False)` ou si la requête
lève une erreur réseau / de décodage. L'annulation (`CancelToken`) interrompt
la tentative en cours et empêche toute nouvelle tentative: dans ce cas
`RequestAborted` est levée au lieu de renvoyer un résultat.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

import httpx

from studysharper.client.cancel import CancelToken
from studysharper.core.config import Settings, get_settings
from studysharper.models.flashcards import ApiResult

logger = logging.getLogger(__name__)

NETWORK_ERROR = "Network error"


@dataclass
class RetryOptions:
    max_attempts: int = 3
    initial_delay: float = 0.5
    backoff_factor: float = 2.0
    max_delay: float = 8.0
    retry_on: Optional[Callable[[ApiResult], bool]] = None

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        if self.initial_delay < 0 or self.max_delay < 0:
            raise ValueError("delays must be >= 0")

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "RetryOptions":
        s = settings or get_settings()
        return cls(
            max_attempts=s.RETRY_MAX_ATTEMPTS,
            initial_delay=s.RETRY_INITIAL_DELAY,
            backoff_factor=s.RETRY_BACKOFF_FACTOR,
            max_delay=s.RETRY_MAX_DELAY,
        )

    def delay_for(self, attempt: int) -> float:
        """Délai après la tentative `attempt` (1-indexé)."""
        return min(self.initial_delay * (self.backoff_factor ** (attempt - 1)), self.max_delay)

    def should_retry(self, result: ApiResult) -> bool:
        if self.retry_on is None:
            return True
        return self.retry_on(result)


async def retry_api_call(
    operation: Callable[[], Awaitable[ApiResult]],
    options: Optional[RetryOptions] = None,
    cancel: Optional[CancelToken] = None,
) -> ApiResult:
    options = options or RetryOptions.from_settings()
    result = None

    for attempt in range(1, options.max_attempts + 1):
        if cancel is not None:
            cancel.raise_if_cancelled()

        try:
            if cancel is not None:
                result = await cancel.guard(operation())
            else:
                result = await operation()
        except (httpx.HTTPError, ValueError) as e:
            # erreur réseau ou réponse illisible: échec "typé", pas d'exception
            result = ApiResult.failure(0, str(e) or NETWORK_ERROR)

        if result.ok:
            return result

        if attempt == options.max_attempts or not options.should_retry(result):
            break

        delay = options.delay_for(attempt)
        logger.warning(
            "Attempt %s/%s failed (%s: %s), retrying in %.2fs",
            attempt, options.max_attempts, result.status, result.error, delay,
        )
        if cancel is not None:
            await cancel.sleep(delay)
        else:
            await asyncio.sleep(delay)

    return result
