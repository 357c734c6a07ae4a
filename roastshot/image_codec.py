"""Data-URL codec for screenshots. The base64 payload is passed through untouched."""
import base64
import re
from typing import NamedTuple

from roastshot.constants import DATA_URL_PATTERN, MSG_ERR_BAD_IMAGE
from roastshot.errors import InvalidImage

_DATA_URL_RE = re.compile(DATA_URL_PATTERN)


class DecodedImage(NamedTuple):
    mime_type: str
    payload: str

    def to_data_url(self) -> str:
        return encode(self.mime_type, self.payload)


def decode(data_url: str) -> DecodedImage:
    """Split ``data:image/<subtype>;base64,<payload>`` into its parts. Raises InvalidImage."""
    match data_url:
        case str():
            found = _DATA_URL_RE.fullmatch(data_url)
        case _:
            found = None
    match found:
        case None:
            raise InvalidImage(MSG_ERR_BAD_IMAGE)
        case m:
            return DecodedImage(mime_type=m.group(1), payload=m.group(2))


def encode(mime_type: str, payload: str) -> str:
    return f"data:{mime_type};base64,{payload}"


def encode_bytes(mime_type: str, raw: bytes) -> str:
    return encode(mime_type, base64.standard_b64encode(raw).decode())


def decode_bytes(data_url: str) -> tuple[str, bytes]:
    """Like decode, but also base64-decodes the payload (client-side image work only)."""
    image = decode(data_url)
    try:
        return image.mime_type, base64.b64decode(image.payload, validate=True)
    except ValueError as exc:
        raise InvalidImage(MSG_ERR_BAD_IMAGE) from exc
