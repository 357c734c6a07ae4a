"""Roast failure taxonomy. Each error knows its wire kind and HTTP status."""
from typing import Optional

from roastshot.constants import (
    ERR_BAD_IMAGE,
    ERR_BAD_REQUEST,
    ERR_MISSING_CONFIG,
    ERR_SERVER,
    ERR_UPSTREAM,
    MSG_ERR_UPSTREAM,
)


class RoastError(Exception):
    kind = ERR_SERVER
    http_status = 500

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or self.kind)
        self.message = message

    def to_payload(self) -> dict:
        payload: dict = {"error": self.kind}
        match self.message:
            case str() as m if m:
                payload["message"] = m
            case _:
                pass
        return payload


class InvalidRequest(RoastError):
    kind = ERR_BAD_REQUEST
    http_status = 400

    def __init__(self, message: Optional[str] = None, http_status: int = 400) -> None:
        super().__init__(message)
        self.http_status = http_status


class InvalidImage(RoastError):
    kind = ERR_BAD_IMAGE
    http_status = 400


class MissingCredential(RoastError):
    kind = ERR_MISSING_CONFIG
    http_status = 500


class UpstreamError(RoastError):
    """Non-success status from the model provider, carried verbatim."""

    kind = ERR_UPSTREAM
    http_status = 502

    def __init__(self, status: int, body: str) -> None:
        super().__init__(MSG_ERR_UPSTREAM % status)
        self.status = status
        self.body = body

    def to_payload(self) -> dict:
        return {**super().to_payload(), "status": self.status, "errText": self.body}


class ServerError(RoastError):
    kind = ERR_SERVER
    http_status = 500
