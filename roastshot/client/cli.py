"""Command-line companion client: roast a screenshot, track the daily quota, save a share card."""
import argparse
import asyncio
import json
import logging
from pathlib import Path
from typing import Optional, Sequence

import httpx

from roastshot.client import share_card
from roastshot.client.api_client import RoastApiClient, RoastApiError
from roastshot.client.privacy import blur_data_url, file_to_data_url
from roastshot.client.usage import JsonFileUsageStore, UsageQuotaTracker
from roastshot.config import ClientConfig
from roastshot.constants import (
    DEFAULT_BLUR_PX,
    DEFAULT_CARD_PATH,
    DEFAULT_TONE,
    MSG_BLUR_APPLIED,
    MSG_LIMIT_REACHED,
    MSG_USAGE_RECORDED,
    TONES,
)
from roastshot.errors import RoastError
from roastshot.log import setup_logging
from roastshot.normalizer import RoastResult

logger = logging.getLogger(__name__)


class QuotaExceeded(Exception):

    def __init__(self, limit: int) -> None:
        super().__init__(MSG_LIMIT_REACHED % limit)
        self.limit = limit


async def run_roast(
    api: RoastApiClient,
    tracker: UsageQuotaTracker,
    image_path: Path,
    tone: str,
    daily_limit: int,
    blur_px: Optional[int] = None,
) -> RoastResult:
    """Quota check → (blur) → roast → record usage. Failed roasts do not count."""
    decision = tracker.check_and_reserve(daily_limit)
    match decision.allowed:
        case False:
            raise QuotaExceeded(daily_limit)
        case True:
            pass

    image_data_url = file_to_data_url(image_path)
    match blur_px:
        case None:
            pass
        case px:
            image_data_url = blur_data_url(image_data_url, px)
            logger.info(MSG_BLUR_APPLIED, px)

    result = await api.roast(image_data_url, tone)
    used = tracker.record_success()
    logger.info(MSG_USAGE_RECORDED, used, daily_limit)
    return result


def _print_result(result: RoastResult) -> None:
    score = "?" if result.chaos_score is None else f"{result.chaos_score}/100"
    print(f"Chaos score: {score}")
    print(result.roast)
    if result.tags:
        print("  ".join(map(lambda t: f"#{t}", result.tags)))


def _positive_int(raw: str) -> int:
    try:
        value = int(raw)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"not an integer: {raw!r}") from exc
    if value <= 0:
        raise argparse.ArgumentTypeError(f"must be positive, got {value}")
    return value


def build_parser() -> argparse.ArgumentParser:

    parser = argparse.ArgumentParser(prog="roastshot", description="Roast My Screenshot client")
    sub = parser.add_subparsers(dest="command", required=True)

    roast = sub.add_parser("roast", help="roast a screenshot")
    roast.add_argument("image", type=Path)
    roast.add_argument("--tone", default=DEFAULT_TONE, help=f"e.g. {', '.join(TONES)}")
    roast.add_argument(
        "--blur",
        type=int,
        nargs="?",
        const=DEFAULT_BLUR_PX,
        default=None,
        metavar="PX",
        help=f"privacy blur radius before upload (default {DEFAULT_BLUR_PX})",
    )
    roast.add_argument("--card", type=Path, default=Path(DEFAULT_CARD_PATH), help="where to save the share card")
    roast.add_argument("--no-card", action="store_true", help="skip rendering the share card")
    roast.add_argument("--limit", type=_positive_int, default=None, help="daily roast limit")

    sub.add_parser("health", help="check the backend")
    sub.add_parser("usage", help="show today's usage")
    return parser


async def _dispatch(args: argparse.Namespace, config: ClientConfig) -> int:
    api = RoastApiClient(config.api_base, user_key=config.user_openai_key)
    tracker = UsageQuotaTracker(JsonFileUsageStore(Path(config.usage_path)))

    match args.command:
        case "health":
            print(json.dumps(await api.health()))
            return 0
        case "usage":
            print(tracker.check_and_reserve(config.daily_limit).message)
            return 0
        case "roast":
            limit = config.daily_limit if args.limit is None else args.limit
            result = await run_roast(api, tracker, args.image, args.tone, limit, args.blur)
            _print_result(result)
            if not args.no_card:
                card = share_card.render(result)
                if card is not None:
                    share_card.save(card, args.card)
            return 0
        case _:
            return 2


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    config = ClientConfig.from_env()
    setup_logging(config.log_level)
    try:
        return asyncio.run(_dispatch(args, config))
    except (QuotaExceeded, RoastApiError, RoastError, httpx.HTTPError) as exc:
        logger.error("%s", exc)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
