from studysharper.client.auth import TokenProvider, static_token
from studysharper.client.cancel import CancelToken
from studysharper.client.flashcards import FlashcardsClient
from studysharper.client.retry import RetryOptions, retry_api_call

__all__ = [
    "CancelToken",
    "FlashcardsClient",
    "RetryOptions",
    "TokenProvider",
    "retry_api_call",
    "static_token",
]
