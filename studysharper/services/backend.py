from __future__ import annotations

import json
import logging
from typing import Any, Optional

import httpx
from fastapi import Request
from fastapi.responses import JSONResponse, Response
from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR

logger = logging.getLogger(__name__)

INTERNAL_ERROR = "Internal server error"


def error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


def extract_error_message(payload: Any, fallback: str) -> str:
    """
    Message d'erreur du backend: `detail` (FastAPI) puis `error`, sinon fallback.
    Seules les chaînes non vides sont retenues (un `detail` de validation est une liste).
    """
    if isinstance(payload, dict):
        for key in ("detail", "error"):
            value = payload.get(key)
            if isinstance(value, str) and value.strip():
                return value
    return fallback


def safe_json(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return {}


class BackendProxy:
    """
    Relais sans état vers le backend StudySharper.

    - transmet `Authorization` tel quel s'il est présent
    - force `Content-Type: application/json`
    - relaie statut + JSON du backend, ou un `{"error": ...}` en cas d'échec
    Pas de retry, pas de cache.
    """

    def __init__(self, client: httpx.AsyncClient):
        self.client = client

    @staticmethod
    def build_headers(authorization: Optional[str]) -> dict:
        headers = {"Content-Type": "application/json"}
        if authorization:
            headers["Authorization"] = authorization
        return headers

    async def forward(
        self,
        method: str,
        path: str,
        *,
        authorization: Optional[str] = None,
        body: Any = None,
        fallback_error: str,
    ) -> Response:
        """
        Envoie la requête au backend et construit la réponse relayée.
        Les erreurs réseau et les 2xx non-JSON remontent à l'appelant (-> 500).
        """
        content = None
        if body is not None:
            content = json.dumps(body)

        response = await self.client.request(
            method,
            path,
            headers=self.build_headers(authorization),
            content=content,
        )
        logger.debug("%s %s -> %s", method, path, response.status_code)
        return self.relay(response, fallback_error)

    def relay(self, response: httpx.Response, fallback_error: str) -> Response:
        if not response.is_success:
            message = extract_error_message(safe_json(response), fallback_error)
            logger.warning("Backend error %s: %s", response.status_code, message)
            return error_response(message, response.status_code)

        # 204 / corps vide: rien à relayer
        if not response.content.strip():
            return JSONResponse({"success": True})

        response.json()  # ValueError si le backend renvoie autre chose que du JSON
        return Response(
            content=response.content,
            status_code=response.status_code,
            media_type="application/json",
        )

    async def pass_through(
        self,
        request: Request,
        method: str,
        path: str,
        *,
        fallback_error: str,
        with_body: bool = False,
    ) -> Response:
        """
        Cas simple: aucun champ requis, on relaie (corps JSON éventuel compris).
        Aucune exception ne sort d'ici.
        """
        try:
            body = await request.json() if with_body else None
            return await self.forward(
                method,
                path,
                authorization=request.headers.get("authorization"),
                body=body,
                fallback_error=fallback_error,
            )
        except Exception:
            logger.exception("Proxy %s %s failed", method, path)
            return error_response(INTERNAL_ERROR, HTTP_500_INTERNAL_SERVER_ERROR)
