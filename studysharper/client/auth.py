from typing import Awaitable, Callable, Dict, Optional

# Fournit le jeton d'accès de la session courante (None si non connecté)
TokenProvider = Callable[[], Awaitable[Optional[str]]]

NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


def static_token(token: Optional[str]) -> TokenProvider:
    """Provider trivial, pratique pour les scripts et les tests."""

    async def provider() -> Optional[str]:
        return token

    return provider


async def auth_headers(token_provider: Optional[TokenProvider]) -> Dict[str, str]:
    headers = dict(NO_CACHE_HEADERS)
    token = await token_provider() if token_provider is not None else None
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers
