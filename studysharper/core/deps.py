from typing import AsyncIterator

import httpx
from fastapi import Depends

from studysharper.core.config import get_settings
from studysharper.services.backend import BackendProxy


def get_settings_dep():
    return get_settings()


async def get_backend_client() -> AsyncIterator[httpx.AsyncClient]:
    """
    Client HTTP vers le backend, un par requête (aucun état partagé).
    """
    settings = get_settings()
    async with httpx.AsyncClient(
        base_url=settings.BACKEND_API_URL.rstrip("/"),
        timeout=settings.BACKEND_TIMEOUT_SECONDS,
    ) as client:
        yield client


def get_backend_proxy(client: httpx.AsyncClient = Depends(get_backend_client)) -> BackendProxy:
    """
    Fournit le proxy backend en dépendance (DI).
    """
    return BackendProxy(client)
