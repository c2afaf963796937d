"""
HTTP client for the DuvidApp backend.

Wraps an httpx.AsyncClient, attaches the bearer token to authenticated
calls and turns every failure into one of the exceptions in
duvidapp.exceptions. Requests are never retried.
"""

import logging
from typing import Any, Optional

import httpx

from duvidapp.config.settings import settings
from duvidapp.exceptions import HttpError, NetworkError, Unauthenticated

logger = logging.getLogger(__name__)

# Shown when the backend gives no message of its own
GENERIC_MESSAGES = {
    "GET": "Falha ao buscar dados do servidor.",
    "POST": "Falha ao enviar dados ao servidor.",
    "PUT": "Falha ao atualizar dados no servidor.",
    "PATCH": "Falha ao atualizar dados no servidor.",
    "DELETE": "Falha ao remover dados do servidor.",
}


def error_message(response: httpx.Response, method: str) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None

    message = body.get("message") if isinstance(body, dict) else None
    if isinstance(message, list):
        message = "; ".join(str(m) for m in message)
    if isinstance(message, str) and message.strip():
        return message
    return GENERIC_MESSAGES.get(method, "Falha na comunicação com o servidor.")


class RemoteClient:
    """Authenticated JSON requests against the backend REST surface"""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        http: Optional[httpx.AsyncClient] = None,
    ):
        self._http = http or httpx.AsyncClient(
            base_url=base_url or settings.api_url,
            timeout=timeout if timeout is not None else settings.request_timeout,
            transport=transport,
        )
        self._token: Optional[str] = None

    @property
    def token(self) -> Optional[str]:
        return self._token

    def set_token(self, token: Optional[str]) -> None:
        # Only SessionStore calls this
        self._token = token

    async def request(self, method: str, path: str, json: Any = None, auth: bool = True) -> Any:
        method = method.upper()
        headers = {"Content-Type": "application/json"}
        if auth:
            if not self._token:
                raise Unauthenticated()
            headers["Authorization"] = f"Bearer {self._token}"

        logger.debug("%s %s", method, path)
        try:
            response = await self._http.request(method, path, json=json, headers=headers)
        except httpx.RequestError as e:
            logger.warning("%s %s failed: %s", method, path, e)
            raise NetworkError() from e

        if response.is_error:
            message = error_message(response, method)
            logger.warning("%s %s -> %s %s", method, path, response.status_code, message)
            raise HttpError(response.status_code, message)

        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise HttpError(response.status_code, "Resposta inválida do servidor.") from e

    async def get(self, path: str, auth: bool = True) -> Any:
        return await self.request("GET", path, auth=auth)

    async def post(self, path: str, json: Any = None, auth: bool = True) -> Any:
        return await self.request("POST", path, json=json, auth=auth)

    async def put(self, path: str, json: Any = None, auth: bool = True) -> Any:
        return await self.request("PUT", path, json=json, auth=auth)

    async def patch(self, path: str, json: Any = None, auth: bool = True) -> Any:
        return await self.request("PATCH", path, json=json, auth=auth)

    async def delete(self, path: str, auth: bool = True) -> Any:
        return await self.request("DELETE", path, auth=auth)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()
