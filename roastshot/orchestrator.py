"""RoastOrchestrator — validates a roast request, calls the model, normalizes the reply."""
import logging
import time
from dataclasses import dataclass
from typing import Optional

from roastshot.constants import (
    DEFAULT_TONE,
    MSG_EMPTY_OUTPUT,
    MSG_ERR_MISSING_KEY,
    MSG_ERR_TONE,
    MSG_NO_TEXT_ROAST,
    MSG_NON_JSON_OUTPUT,
    MSG_ROAST_OK,
    MSG_ROAST_REQUEST,
    MSG_UPSTREAM_FAILED,
    RESPONSE_FORMAT,
    SYSTEM_PROMPT,
    TONE_MAX_LENGTH,
    USER_PROMPT,
)
from roastshot.errors import InvalidRequest, MissingCredential, UpstreamError
from roastshot.extractor import extract
from roastshot.image_codec import DecodedImage, decode
from roastshot.normalizer import RoastResult, normalize
from roastshot.vision.client import RoastModelClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RoastRequest:
    image_data_url: str
    tone: Optional[str] = None


@dataclass(frozen=True)
class Credentials:
    """Two optional key sources; the per-call header key wins over the process default."""

    header_key: Optional[str] = None
    default_key: Optional[str] = None

    def resolve(self) -> str:
        header = (self.header_key or "").strip()
        default = (self.default_key or "").strip()
        match (header, default):
            case (h, _) if h:
                return h
            case (_, d) if d:
                return d
            case _:
                raise MissingCredential(MSG_ERR_MISSING_KEY)


# ── pure helpers ──────────────────────────────────────────────────────────────


def validate_tone(tone: Optional[str]) -> str:
    match tone:
        case None:
            return DEFAULT_TONE
        case str() as t if 0 < len(t) <= TONE_MAX_LENGTH:
            return t
        case _:
            raise InvalidRequest(MSG_ERR_TONE)


def build_request_body(model: str, tone: str, image: DecodedImage) -> dict:
    """Responses API body: a fixed system turn, then the tone instruction plus the image."""
    return {
        "model": model,
        "input": [
            {
                "role": "system",
                "content": [{"type": "input_text", "text": SYSTEM_PROMPT}],
            },
            {
                "role": "user",
                "content": [
                    {"type": "input_text", "text": USER_PROMPT % tone},
                    {"type": "input_image", "image_url": image.to_data_url()},
                ],
            },
        ],
        "text": RESPONSE_FORMAT,
    }


def result_from_text(text: str) -> RoastResult:
    """Empty text and non-JSON text both degrade to a renderable result."""
    match text:
        case "":
            logger.warning(MSG_EMPTY_OUTPUT)
            return RoastResult.degraded(MSG_NO_TEXT_ROAST)
        case _:
            pass
    try:
        return normalize(text)
    except ValueError:
        logger.warning(MSG_NON_JSON_OUTPUT)
        return RoastResult.degraded(text)


# ── orchestrator ──────────────────────────────────────────────────────────────


class RoastOrchestrator:

    def __init__(self, model_client: RoastModelClient, model: str) -> None:
        self._model_client = model_client
        self._model = model

    async def roast(self, request: RoastRequest, credentials: Credentials) -> RoastResult:
        tone = validate_tone(request.tone)
        image = decode(request.image_data_url)
        api_key = credentials.resolve()

        logger.info(MSG_ROAST_REQUEST, tone, image.mime_type, len(image.payload) // 1024)
        body = build_request_body(self._model, tone, image)

        start = time.monotonic()
        try:
            envelope = await self._model_client.respond(body, api_key)
        except UpstreamError as exc:
            logger.error(MSG_UPSTREAM_FAILED, exc.status, time.monotonic() - start)
            raise

        result = result_from_text(extract(envelope))
        logger.info(MSG_ROAST_OK, time.monotonic() - start, result.chaos_score, len(result.tags))
        return result
