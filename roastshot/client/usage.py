"""Per-day roast quota, persisted as a JSON object of day-key → count."""
import json
import logging
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Callable

from roastshot.constants import (
    DAY_KEY_FORMAT,
    DEFAULT_USAGE_PATH,
    MSG_DAILY_LIMIT,
    MSG_LIMIT_REACHED,
    MSG_USAGE_LOAD_FAILED,
)

logger = logging.getLogger(__name__)


class UsageStore(ABC):
    @abstractmethod
    def load(self) -> dict[str, int]: ...

    @abstractmethod
    def save(self, counts: dict[str, int]) -> None: ...


class InMemoryUsageStore(UsageStore):

    def __init__(self, counts: dict[str, int] | None = None) -> None:
        self._counts = dict(counts or {})

    def load(self) -> dict[str, int]:
        return dict(self._counts)

    def save(self, counts: dict[str, int]) -> None:
        self._counts = dict(counts)


class JsonFileUsageStore(UsageStore):

    def __init__(self, path: Path = Path(DEFAULT_USAGE_PATH)) -> None:
        self._path = path

    def load(self) -> dict[str, int]:
        match self._path.exists():
            case True:
                try:
                    with open(self._path) as f:
                        raw = json.load(f)
                    return raw if isinstance(raw, dict) else {}
                except (OSError, ValueError) as e:
                    logger.warning(MSG_USAGE_LOAD_FAILED, e)
                    return {}
            case False:
                return {}

    def save(self, counts: dict[str, int]) -> None:
        with open(self._path, "w") as f:
            json.dump(counts, f, indent=2)


@dataclass(frozen=True)
class QuotaDecision:
    allowed: bool
    used: int
    limit: int

    @property
    def remaining(self) -> int:
        return max(0, self.limit - self.used)

    @property
    def message(self) -> str:
        match self.allowed:
            case True:
                return MSG_DAILY_LIMIT % (self.used, self.limit, self.remaining)
            case False:
                return MSG_LIMIT_REACHED % self.limit


def day_key(day: date) -> str:
    return day.strftime(DAY_KEY_FORMAT)


def _count(value: object) -> int:
    match value:
        case bool():
            return 0
        case float() if not math.isfinite(value):
            return 0
        case int() | float():
            return int(value)
        case str() if value.strip().isdecimal():
            try:
                return int(value)
            except ValueError:
                return 0
        case _:
            return 0


class UsageQuotaTracker:
    """Check before a roast, record after a successful one. Not safe for concurrent writers."""

    def __init__(self, store: UsageStore, today: Callable[[], date] = date.today) -> None:
        self._store = store
        self._today = today

    def used_today(self) -> int:
        return _count(self._store.load().get(day_key(self._today()), 0))

    def check_and_reserve(self, daily_limit: int) -> QuotaDecision:
        used = self.used_today()
        decision = QuotaDecision(allowed=used < daily_limit, used=used, limit=daily_limit)
        logger.info(decision.message)
        return decision

    def record_success(self) -> int:
        counts = self._store.load()
        key = day_key(self._today())
        counts[key] = _count(counts.get(key, 0)) + 1
        self._store.save(counts)
        return counts[key]
