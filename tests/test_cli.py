import io
import json
from datetime import date

import pytest
from PIL import Image
from unittest.mock import AsyncMock

from roastshot.client.api_client import RoastApiError
from roastshot.client.cli import QuotaExceeded, main, run_roast
from roastshot.client.usage import InMemoryUsageStore, UsageQuotaTracker, day_key
from roastshot.image_codec import decode
from roastshot.normalizer import RoastResult


@pytest.fixture
def screenshot(tmp_path):
    path = tmp_path / "shot.png"
    buf = io.BytesIO()
    Image.new("RGB", (20, 40), color=(10, 200, 10)).save(buf, format="PNG")
    path.write_bytes(buf.getvalue())
    return path


def _api(result=None, side_effect=None) -> AsyncMock:
    api = AsyncMock()
    api.roast = AsyncMock(return_value=result, side_effect=side_effect)
    return api


async def test_successful_roast_records_usage(screenshot):
    tracker = UsageQuotaTracker(InMemoryUsageStore())
    api = _api(RoastResult(roast="Green screen of envy.", chaos_score=12))

    result = await run_roast(api, tracker, screenshot, "Friendly", daily_limit=3)

    assert result.roast == "Green screen of envy."
    assert tracker.used_today() == 1
    data_url, tone = api.roast.call_args.args
    assert decode(data_url).mime_type == "image/png"
    assert tone == "Friendly"


async def test_failed_roast_does_not_count(screenshot):
    tracker = UsageQuotaTracker(InMemoryUsageStore())
    api = _api(side_effect=RoastApiError("upstream_error", "Model provider returned HTTP 401", 502))

    with pytest.raises(RoastApiError):
        await run_roast(api, tracker, screenshot, "Brutal", daily_limit=3)

    assert tracker.used_today() == 0


async def test_quota_exhausted_skips_network_call(screenshot):
    tracker = UsageQuotaTracker(InMemoryUsageStore())
    list(map(lambda _: tracker.record_success(), range(3)))
    api = _api(RoastResult(roast="never"))

    with pytest.raises(QuotaExceeded, match="Daily limit reached"):
        await run_roast(api, tracker, screenshot, "Brutal", daily_limit=3)

    api.roast.assert_not_called()
    assert tracker.used_today() == 3


async def test_blur_sends_png_data_url(tmp_path):
    path = tmp_path / "shot.jpg"
    Image.new("RGB", (20, 20), color=(1, 2, 3)).save(path, format="JPEG")
    tracker = UsageQuotaTracker(InMemoryUsageStore())
    api = _api(RoastResult(roast="blurry"))

    await run_roast(api, tracker, path, "Brutal", daily_limit=3, blur_px=4)

    data_url, _ = api.roast.call_args.args
    assert decode(data_url).mime_type == "image/png"


def test_usage_command_prints_today(monkeypatch, tmp_path, capsys):
    monkeypatch.setattr("roastshot.config.load_dotenv", lambda **_: None)
    usage_path = tmp_path / "usage.json"
    usage_path.write_text(json.dumps({}))
    monkeypatch.setenv("ROAST_USAGE_PATH", str(usage_path))
    monkeypatch.setenv("ROAST_DAILY_LIMIT", "3")

    assert main(["usage"]) == 0
    assert "Daily limit: 0/3 used (3 remaining)" in capsys.readouterr().out


def test_roast_command_reports_errors(monkeypatch, tmp_path, screenshot):
    monkeypatch.setattr("roastshot.config.load_dotenv", lambda **_: None)
    monkeypatch.setenv("ROAST_USAGE_PATH", str(tmp_path / "usage.json"))
    monkeypatch.setattr(
        "roastshot.client.cli.RoastApiClient.roast",
        AsyncMock(side_effect=RoastApiError("bad_image", "bad_image", 400)),
    )

    assert main(["roast", str(screenshot), "--no-card"]) == 1
    assert not (tmp_path / "usage.json").exists()


def test_roast_command_writes_card(monkeypatch, tmp_path, screenshot, capsys):
    monkeypatch.setattr("roastshot.config.load_dotenv", lambda **_: None)
    monkeypatch.setenv("ROAST_USAGE_PATH", str(tmp_path / "usage.json"))
    monkeypatch.setattr(
        "roastshot.client.cli.RoastApiClient.roast",
        AsyncMock(return_value=RoastResult(roast="Nice try.", chaos_score=10, tags=("meh",))),
    )
    card_path = tmp_path / "card.png"

    assert main(["roast", str(screenshot), "--tone", "Friendly", "--card", str(card_path)]) == 0

    out = capsys.readouterr().out
    assert "Chaos score: 10/100" in out
    assert "#meh" in out
    assert card_path.exists()
    assert len(json.loads((tmp_path / "usage.json").read_text())) == 1


@pytest.mark.parametrize("limit", ["0", "-2", "three"])
def test_limit_must_be_a_positive_integer(screenshot, limit):
    with pytest.raises(SystemExit) as excinfo:
        main(["roast", str(screenshot), "--limit", limit])

    assert excinfo.value.code == 2


def test_explicit_limit_overrides_configured_limit(monkeypatch, tmp_path, screenshot):
    monkeypatch.setattr("roastshot.config.load_dotenv", lambda **_: None)
    usage_path = tmp_path / "usage.json"
    usage_path.write_text(json.dumps({day_key(date.today()): 1}))
    monkeypatch.setenv("ROAST_USAGE_PATH", str(usage_path))
    monkeypatch.setenv("ROAST_DAILY_LIMIT", "5")
    roast = AsyncMock(return_value=RoastResult(roast="unused"))
    monkeypatch.setattr("roastshot.client.cli.RoastApiClient.roast", roast)

    assert main(["roast", str(screenshot), "--no-card", "--limit", "1"]) == 1
    roast.assert_not_called()
