"""HTTP surface: POST /roast and GET /health, also served under /api."""
import json
import logging
from typing import Optional

from fastapi import APIRouter, FastAPI, Header, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError, field_validator

from roastshot.config import Config
from roastshot.constants import (
    API_PREFIX,
    CORS_HEADERS,
    CORS_METHODS,
    DATA_URL_PREFIX,
    HEADER_SERVER_VERSION,
    MSG_ERR_BAD_JSON,
    MSG_ERR_IMAGE_URL,
    MSG_ERR_TOO_LARGE,
    MSG_REQUEST_REJECTED,
    MSG_UNEXPECTED_ERROR,
)
from roastshot.errors import InvalidRequest, RoastError, ServerError
from roastshot.orchestrator import Credentials, RoastOrchestrator, RoastRequest
from roastshot.vision.openai import OpenAIResponsesClient

logger = logging.getLogger(__name__)


class RoastBody(BaseModel):
    imageDataUrl: str
    tone: Optional[str] = None

    @field_validator("imageDataUrl")
    @classmethod
    def _must_be_image_data_url(cls, value: str) -> str:
        if not value.startswith(DATA_URL_PREFIX):
            raise ValueError(MSG_ERR_IMAGE_URL)
        return value


def _reject_declared_oversize(content_length: Optional[str], max_bytes: int) -> None:
    """Refuse a body whose declared length is over the cap before reading it."""
    try:
        declared = int(content_length or "")
    except ValueError:
        return
    if declared > max_bytes:
        raise InvalidRequest(MSG_ERR_TOO_LARGE % max_bytes, http_status=413)


def _parse_body(raw: bytes, max_bytes: int) -> RoastBody:
    match len(raw):
        case n if n > max_bytes:
            raise InvalidRequest(MSG_ERR_TOO_LARGE % max_bytes, http_status=413)
        case _:
            pass
    try:
        data = json.loads(raw or b"{}")
    except ValueError as exc:
        raise InvalidRequest(f"{MSG_ERR_BAD_JSON}: {exc}") from exc
    match data:
        case dict():
            pass
        case _:
            raise InvalidRequest(MSG_ERR_BAD_JSON)
    try:
        return RoastBody.model_validate(data)
    except ValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(map(str, first.get("loc", ()))) or "body"
        raise InvalidRequest(f"{field}: {first.get('msg')}") from exc


def _error(exc: RoastError, version: str) -> JSONResponse:
    return JSONResponse(
        status_code=exc.http_status,
        content=exc.to_payload(),
        headers={HEADER_SERVER_VERSION: version},
    )


def _build_router(config: Config, orchestrator: RoastOrchestrator) -> APIRouter:
    router = APIRouter()

    @router.get("/health")
    def health() -> dict:
        return {"ok": True, "version": config.server_version}

    @router.post("/roast")
    async def roast(
        request: Request,
        x_user_openai_key: Optional[str] = Header(default=None),
    ) -> JSONResponse:
        try:
            _reject_declared_oversize(request.headers.get("content-length"), config.max_body_bytes)
            body = _parse_body(await request.body(), config.max_body_bytes)
            result = await orchestrator.roast(
                RoastRequest(image_data_url=body.imageDataUrl, tone=body.tone),
                Credentials(header_key=x_user_openai_key, default_key=config.openai_api_key),
            )
        except RoastError as exc:
            logger.warning(MSG_REQUEST_REJECTED, exc.kind, exc.message)
            return _error(exc, config.server_version)
        except Exception as exc:
            logger.exception(MSG_UNEXPECTED_ERROR)
            return _error(ServerError(str(exc)), config.server_version)
        return JSONResponse(
            content=result.to_payload(),
            headers={HEADER_SERVER_VERSION: config.server_version},
        )

    return router


def create_app(config: Config, orchestrator: Optional[RoastOrchestrator] = None) -> FastAPI:
    match orchestrator:
        case None:
            orchestrator = RoastOrchestrator(
                OpenAIResponsesClient(config.openai_base_url, config.openai_timeout),
                config.openai_model,
            )
        case _:
            pass

    app = FastAPI(title="Roast My Screenshot")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=CORS_METHODS,
        allow_headers=CORS_HEADERS,
    )
    router = _build_router(config, orchestrator)
    app.include_router(router)
    app.include_router(router, prefix=API_PREFIX)
    return app
