from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional
import os
from dotenv import load_dotenv

from roastshot.constants import (
    DEFAULT_API_BASE,
    DEFAULT_DAILY_LIMIT,
    DEFAULT_HOST,
    DEFAULT_LOG_LEVEL,
    DEFAULT_MAX_BODY_BYTES,
    DEFAULT_OPENAI_BASE_URL,
    DEFAULT_OPENAI_MODEL,
    DEFAULT_OPENAI_TIMEOUT,
    DEFAULT_PORT,
    DEFAULT_USAGE_PATH,
)


def _parse_int(name: str, raw: str) -> int:
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def _default_server_version() -> str:
    return f"server-{datetime.now(timezone.utc).isoformat()}"


@dataclass(frozen=True)
class Config:
    openai_api_key: Optional[str]
    openai_model: str
    openai_base_url: str
    openai_timeout: int
    log_level: str
    host: str
    port: int
    max_body_bytes: int
    server_version: str

    @classmethod
    def from_env(cls) -> "Config":
        load_dotenv()

        openai_api_key = os.getenv("OPENAI_API_KEY") or None
        openai_model = os.getenv("OPENAI_MODEL") or DEFAULT_OPENAI_MODEL
        openai_base_url = os.getenv("OPENAI_BASE_URL") or DEFAULT_OPENAI_BASE_URL
        openai_timeout = os.getenv("OPENAI_TIMEOUT", DEFAULT_OPENAI_TIMEOUT)
        log_level = os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL)
        host = os.getenv("HOST", DEFAULT_HOST)
        port = os.getenv("PORT", DEFAULT_PORT)
        max_body_bytes = os.getenv("MAX_BODY_BYTES", DEFAULT_MAX_BODY_BYTES)
        server_version = os.getenv("SERVER_VERSION") or _default_server_version()

        return cls._validate(
            openai_api_key=openai_api_key,
            openai_model=openai_model,
            openai_base_url=openai_base_url,
            openai_timeout=_parse_int("OPENAI_TIMEOUT", openai_timeout),
            log_level=log_level,
            host=host,
            port=_parse_int("PORT", port),
            max_body_bytes=_parse_int("MAX_BODY_BYTES", max_body_bytes),
            server_version=server_version,
        )

    @staticmethod
    def _validate(
        openai_api_key: Optional[str],
        openai_model: str,
        openai_base_url: str,
        openai_timeout: int,
        log_level: str,
        host: str,
        port: int,
        max_body_bytes: int,
        server_version: str,
    ) -> "Config":
        match openai_timeout:
            case t if t <= 0:
                raise ValueError("OPENAI_TIMEOUT must be positive")
            case _:
                pass

        match max_body_bytes:
            case n if n <= 0:
                raise ValueError("MAX_BODY_BYTES must be positive")
            case _:
                pass

        return Config(
            openai_api_key=openai_api_key,
            openai_model=openai_model,
            openai_base_url=openai_base_url,
            openai_timeout=openai_timeout,
            log_level=log_level,
            host=host,
            port=port,
            max_body_bytes=max_body_bytes,
            server_version=server_version,
        )


@dataclass(frozen=True)
class ClientConfig:
    api_base: str
    daily_limit: int
    usage_path: str
    user_openai_key: Optional[str]
    log_level: str

    @classmethod
    def from_env(cls) -> "ClientConfig":
        load_dotenv()

        api_base = os.getenv("ROAST_API_BASE") or DEFAULT_API_BASE
        daily_limit = _parse_int(
            "ROAST_DAILY_LIMIT", os.getenv("ROAST_DAILY_LIMIT", DEFAULT_DAILY_LIMIT)
        )
        usage_path = os.getenv("ROAST_USAGE_PATH") or DEFAULT_USAGE_PATH
        user_openai_key = os.getenv("ROAST_USER_OPENAI_KEY") or None
        log_level = os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL)

        match daily_limit:
            case n if n <= 0:
                raise ValueError("ROAST_DAILY_LIMIT must be positive")
            case _:
                pass

        return cls(
            api_base=api_base.rstrip("/"),
            daily_limit=daily_limit,
            usage_path=usage_path,
            user_openai_key=user_openai_key,
            log_level=log_level,
        )
