"""RoastModelClient — abstract base for vision model backends."""
from abc import ABC, abstractmethod
from typing import Any


class RoastModelClient(ABC):
    @abstractmethod
    async def respond(self, request_body: dict, api_key: str) -> Any:
        """Send one model request and return the raw JSON envelope.

        Raises UpstreamError on a non-success status. Never retries.
        """
        ...
