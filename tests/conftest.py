import json

import httpx
import pytest
from fastapi.testclient import TestClient

from studysharper.core.config import get_settings
from studysharper.core.deps import get_backend_client
from studysharper.main import create_app

BACKEND_URL = "http://backend.test"


class FakeBackend:
    """
    Backend simulé (httpx.MockTransport): enregistre chaque requête reçue
    et renvoie la réponse programmée.
    """

    def __init__(self):
        self.requests = []
        self._responder = lambda request: httpx.Response(200, json={})

    def respond_with(self, status_code: int = 200, **kwargs):
        self._responder = lambda request: httpx.Response(status_code, **kwargs)

    def raise_error(self, exc_type=httpx.ConnectError):
        def responder(request):
            raise exc_type("backend unreachable", request=request)
        self._responder = responder

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._responder(request)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self):
        return json.loads(self.last.content)


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def test_client(monkeypatch, backend):
    """
    TestClient avec un backend simulé à la place du vrai BACKEND_API_URL,
    et quelques variables d'env forcées pour les tests.
    """
    monkeypatch.setenv("APP_ENV", "test")
    monkeypatch.setenv("APP_NAME", "StudySharper Web Edge (tests)")
    monkeypatch.setenv("BACKEND_API_URL", BACKEND_URL)
    monkeypatch.setenv("CORS_ORIGINS", "http://localhost")

    # IMPORTANT: vider le cache des settings pour prendre en compte les env
    get_settings.cache_clear()

    app = create_app()

    async def fake_backend_client():
        async with httpx.AsyncClient(
            base_url=BACKEND_URL,
            transport=httpx.MockTransport(backend.handler),
        ) as client:
            yield client

    app.dependency_overrides[get_backend_client] = fake_backend_client

    with TestClient(app) as client:
        yield client

    get_settings.cache_clear()
