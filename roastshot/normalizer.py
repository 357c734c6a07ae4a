"""RoastResult and the normalizer that turns model JSON into one."""
import json
import math
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from roastshot.constants import MAX_TAGS, MSG_NO_ROAST_FALLBACK

Score = Union[int, float]


@dataclass(frozen=True)
class RoastResult:
    roast: str
    chaos_score: Optional[Score] = None
    tags: tuple[str, ...] = field(default_factory=tuple)

    def to_payload(self) -> dict:
        return {"roast": self.roast, "chaosScore": self.chaos_score, "tags": list(self.tags)}

    @classmethod
    def degraded(cls, roast: str) -> "RoastResult":
        """A renderable result with no score or tags."""
        return cls(roast=roast)


def _roast_text(value: Any) -> str:
    match value:
        case str() as text if text.strip():
            return text
        case _:
            return MSG_NO_ROAST_FALLBACK


def normalize_score(value: Any) -> Optional[Score]:
    """Finite numbers pass (integral floats collapse to int); everything else is None."""
    match value:
        case bool():
            return None
        case int():
            return value
        case float() if math.isfinite(value):
            return int(value) if value.is_integer() else value
        case _:
            return None


def _tag_text(value: Any) -> str:
    """String form of a tag value: numbers print like scores, lists join with commas."""
    match value:
        case str():
            return value
        case None:
            return "null"
        case bool():
            return "true" if value else "false"
        case float() if value.is_integer():
            return str(int(value))
        case int() | float():
            return str(value)
        case list():
            return ",".join(map(lambda v: "" if v is None else _tag_text(v), value))
        case _:
            return json.dumps(value, ensure_ascii=False)


def _tags(value: Any) -> tuple[str, ...]:
    match value:
        case list():
            return tuple(map(_tag_text, value[:MAX_TAGS]))
        case _:
            return ()


def normalize_payload(parsed: Any) -> RoastResult:
    """Build a RoastResult from an already-parsed object. Unknown keys are ignored."""
    fields = parsed if isinstance(parsed, dict) else {}
    return RoastResult(
        roast=_roast_text(fields.get("roast")),
        chaos_score=normalize_score(fields.get("chaosScore")),
        tags=_tags(fields.get("tags")),
    )


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def _parse_int(digits: str) -> Score:
    try:
        return int(digits)
    except ValueError:
        # past the int digit limit; float() yields inf, which the score check drops
        return float(digits)


def normalize(raw_text: str) -> RoastResult:
    """Parse ``raw_text`` as strict JSON and normalize it. Raises ValueError on non-JSON."""
    return normalize_payload(
        json.loads(raw_text, parse_constant=_reject_constant, parse_int=_parse_int)
    )
