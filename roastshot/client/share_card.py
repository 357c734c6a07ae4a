"""Share card renderer — a fixed-size story card for a roast result, drawn with Pillow."""
import io
import logging
from functools import lru_cache
from pathlib import Path
from typing import Callable, Optional

from PIL import Image, ImageDraw, ImageFont

from roastshot.constants import (
    CARD_FONT_CANDIDATES,
    CARD_FOOTER,
    CARD_FOOTER_FILL,
    CARD_FOOTER_FONT_SIZE,
    CARD_FOOTER_Y,
    CARD_GRADIENT,
    CARD_MARGIN_X,
    CARD_PANEL_BOX,
    CARD_PANEL_FILL,
    CARD_PANEL_RADIUS,
    CARD_PILL_FILL,
    CARD_PILL_FONT_SIZE,
    CARD_PILL_HEIGHT,
    CARD_PILL_PADDING,
    CARD_PILL_RADIUS,
    CARD_PILL_SCORE,
    CARD_PILL_TEXT_BASELINE,
    CARD_PILL_UNKNOWN,
    CARD_PILL_Y,
    CARD_ROAST_FONT_SIZE,
    CARD_ROAST_LINE_HEIGHT,
    CARD_ROAST_MAX_LINES,
    CARD_ROAST_WRAP_WIDTH,
    CARD_ROAST_X,
    CARD_ROAST_Y,
    CARD_SIZE,
    CARD_TAG_SEPARATOR,
    CARD_TAGS_FILL,
    CARD_TAGS_FONT_SIZE,
    CARD_TAGS_Y,
    CARD_TEXT_FILL,
    CARD_TITLE,
    CARD_TITLE_FONT_SIZE,
    CARD_TITLE_Y,
    MSG_CARD_WRITTEN,
)
from roastshot.normalizer import RoastResult

logger = logging.getLogger(__name__)

Font = ImageFont.FreeTypeFont | ImageFont.ImageFont
FontLoader = Callable[[int], Font]


@lru_cache(maxsize=8)
def load_font(size: int) -> Font:
    for candidate in CARD_FONT_CANDIDATES:
        try:
            return ImageFont.truetype(candidate, size)
        except OSError:
            continue
    return ImageFont.load_default(size=size)


# ── pure helpers ──────────────────────────────────────────────────────────────


def wrap_text(text: str, measure: Callable[[str], float], max_width: float) -> list[str]:
    """Greedy word wrap: a word that would push the line past max_width starts a new line."""
    lines: list[str] = []
    line = ""
    for word in str(text).replace("\r", "").split():
        candidate = f"{line} {word}" if line else word
        match measure(candidate) > max_width:
            case True:
                if line:
                    lines.append(line)
                line = word
            case False:
                line = candidate
    if line:
        lines.append(line)
    return lines


def pill_text(chaos_score) -> str:
    match chaos_score:
        case None:
            return CARD_PILL_UNKNOWN
        case score:
            return CARD_PILL_SCORE % score


def tags_line(tags) -> str:
    return CARD_TAG_SEPARATOR.join(map(lambda t: f"#{t}", tags))


def _gradient(size: tuple[int, int]) -> Image.Image:
    start, end = (Image.new("RGB", size, color) for color in CARD_GRADIENT)
    mask = Image.linear_gradient("L").resize(size)
    return Image.composite(end, start, mask)


# ── renderer ──────────────────────────────────────────────────────────────────


def render(result: Optional[RoastResult], font_loader: FontLoader = load_font) -> Optional[Image.Image]:
    """Draw the share card, or return None when there is no roast to show."""
    if result is None or not result.roast:
        return None

    card = _gradient(CARD_SIZE)
    draw = ImageDraw.Draw(card, "RGBA")

    title_font = font_loader(CARD_TITLE_FONT_SIZE)
    pill_font = font_loader(CARD_PILL_FONT_SIZE)
    roast_font = font_loader(CARD_ROAST_FONT_SIZE)

    pill = pill_text(result.chaos_score)
    pill_width = draw.textlength(pill, font=pill_font) + CARD_PILL_PADDING * 2
    draw.rounded_rectangle(
        (CARD_MARGIN_X, CARD_PILL_Y, CARD_MARGIN_X + pill_width, CARD_PILL_Y + CARD_PILL_HEIGHT),
        radius=CARD_PILL_RADIUS,
        fill=CARD_PILL_FILL,
    )
    px, py, pw, ph = CARD_PANEL_BOX
    draw.rounded_rectangle((px, py, px + pw, py + ph), radius=CARD_PANEL_RADIUS, fill=CARD_PANEL_FILL)

    draw.text((CARD_MARGIN_X, CARD_TITLE_Y), CARD_TITLE, font=title_font, fill=CARD_TEXT_FILL, anchor="ls")
    draw.text(
        (CARD_MARGIN_X + CARD_PILL_PADDING, CARD_PILL_Y + CARD_PILL_TEXT_BASELINE),
        pill,
        font=pill_font,
        fill=CARD_TEXT_FILL,
        anchor="ls",
    )

    lines = wrap_text(
        result.roast,
        lambda s: draw.textlength(s, font=roast_font),
        CARD_ROAST_WRAP_WIDTH,
    )
    for index, line in enumerate(lines[:CARD_ROAST_MAX_LINES]):
        y = CARD_ROAST_Y + index * CARD_ROAST_LINE_HEIGHT
        draw.text((CARD_ROAST_X, y), line, font=roast_font, fill=CARD_TEXT_FILL, anchor="ls")

    if result.tags:
        draw.text(
            (CARD_MARGIN_X, CARD_TAGS_Y),
            tags_line(result.tags),
            font=font_loader(CARD_TAGS_FONT_SIZE),
            fill=CARD_TAGS_FILL,
            anchor="ls",
        )

    draw.text(
        (CARD_MARGIN_X, CARD_FOOTER_Y),
        CARD_FOOTER,
        font=font_loader(CARD_FOOTER_FONT_SIZE),
        fill=CARD_FOOTER_FILL,
        anchor="ls",
    )
    return card


def to_png_bytes(card: Image.Image) -> bytes:
    buf = io.BytesIO()
    card.save(buf, format="PNG")
    return buf.getvalue()


def save(card: Image.Image, path: Path) -> Path:
    path.write_bytes(to_png_bytes(card))
    logger.info(MSG_CARD_WRITTEN, path)
    return path
