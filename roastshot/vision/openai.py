"""OpenAIResponsesClient — OpenAI Responses API backend."""
import logging
from typing import Any, Optional

import httpx
from openai import APIConnectionError, APIStatusError, AsyncOpenAI

from roastshot.constants import RESPONSES_PATH
from roastshot.errors import ServerError, UpstreamError
from roastshot.vision.client import RoastModelClient

logger = logging.getLogger(__name__)


class OpenAIResponsesClient(RoastModelClient):

    def __init__(
        self,
        base_url: str,
        timeout: float,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._base_url = base_url
        self._timeout = timeout
        self._http_client = http_client

    async def respond(self, request_body: dict, api_key: str) -> Any:
        client = AsyncOpenAI(
            api_key=api_key,
            base_url=self._base_url,
            timeout=self._timeout,
            max_retries=0,
            http_client=self._http_client,
        )
        match self._http_client:
            case None:
                async with client:
                    response = await self._post(client, request_body)
            case _:
                # closing the SDK client would close the shared transport too
                response = await self._post(client, request_body)

        try:
            return response.json()
        except ValueError as exc:
            logger.warning("Upstream body is not JSON: %s", exc)
            return None

    @staticmethod
    async def _post(client: AsyncOpenAI, request_body: dict) -> httpx.Response:
        try:
            # Raw post keeps the provider's JSON envelope intact for the extractor.
            return await client.post(RESPONSES_PATH, cast_to=httpx.Response, body=request_body)
        except APIStatusError as exc:
            raise UpstreamError(exc.status_code, exc.response.text) from exc
        except APIConnectionError as exc:
            raise ServerError(str(exc)) from exc
