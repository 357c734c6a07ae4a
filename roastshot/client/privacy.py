"""Screenshot prep before upload: file → data URL, optional privacy blur."""
import io
import mimetypes
from pathlib import Path

from PIL import Image, ImageFilter

from roastshot.constants import MAX_BLUR_PX, MSG_NOT_AN_IMAGE, PNG_MIME
from roastshot.errors import InvalidImage
from roastshot.image_codec import decode_bytes, encode_bytes


def file_to_data_url(path: Path) -> str:
    mime_type, _ = mimetypes.guess_type(path.name)
    match mime_type:
        case str() as m if m.startswith("image/"):
            return encode_bytes(m, path.read_bytes())
        case _:
            raise InvalidImage(MSG_NOT_AN_IMAGE)


def blur_data_url(data_url: str, blur_px: int) -> str:
    """Gaussian-blur the image and re-encode it as PNG. Radius is clamped to 0..MAX_BLUR_PX."""
    _, raw = decode_bytes(data_url)
    radius = min(max(0, blur_px), MAX_BLUR_PX)
    try:
        with Image.open(io.BytesIO(raw)) as img:
            blurred = img.convert("RGBA").filter(ImageFilter.GaussianBlur(radius))
    except OSError as exc:
        raise InvalidImage(str(exc)) from exc
    buf = io.BytesIO()
    blurred.save(buf, format="PNG")
    return encode_bytes(PNG_MIME, buf.getvalue())
