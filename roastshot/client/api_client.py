"""RoastApiClient — talks to the roast server over HTTP."""
import logging
from typing import Any, Optional

import httpx

from roastshot.constants import DEFAULT_CLIENT_TIMEOUT, HEADER_USER_KEY, MSG_REQUEST_FAILED
from roastshot.normalizer import RoastResult, normalize_payload

logger = logging.getLogger(__name__)


class RoastApiError(Exception):

    def __init__(self, kind: str, message: str, status_code: int) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.status_code = status_code


def _error_from_response(response: httpx.Response) -> RoastApiError:
    try:
        data: Any = response.json()
    except ValueError:
        data = {}
    fields = data if isinstance(data, dict) else {}
    kind = fields.get("error") or MSG_REQUEST_FAILED
    message = fields.get("message") or kind
    return RoastApiError(kind=kind, message=message, status_code=response.status_code)


class RoastApiClient:

    def __init__(
        self,
        api_base: str,
        user_key: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = DEFAULT_CLIENT_TIMEOUT,
    ) -> None:
        self._api_base = api_base.rstrip("/")
        self._user_key = user_key
        self._transport = transport
        self._timeout = timeout

    def _client(self) -> httpx.AsyncClient:
        headers = {HEADER_USER_KEY: self._user_key} if self._user_key else {}
        return httpx.AsyncClient(
            base_url=self._api_base,
            headers=headers,
            timeout=self._timeout,
            transport=self._transport,
        )

    async def health(self) -> dict:
        async with self._client() as client:
            response = await client.get("/health")
        logger.debug("GET /health -> %d", response.status_code)
        match response.status_code:
            case 200:
                return response.json()
            case _:
                raise _error_from_response(response)

    async def roast(self, image_data_url: str, tone: str) -> RoastResult:
        async with self._client() as client:
            response = await client.post(
                "/roast", json={"imageDataUrl": image_data_url, "tone": tone}
            )
        logger.debug("POST /roast -> %d", response.status_code)
        match response.status_code:
            case 200:
                return normalize_payload(response.json())
            case _:
                raise _error_from_response(response)
