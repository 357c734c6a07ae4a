import pytest
from unittest.mock import AsyncMock

from roastshot.constants import (
    DEFAULT_TONE,
    MSG_NO_TEXT_ROAST,
    RESPONSE_FORMAT,
    SYSTEM_PROMPT,
)
from roastshot.errors import InvalidImage, InvalidRequest, MissingCredential, UpstreamError
from roastshot.image_codec import decode
from roastshot.normalizer import RoastResult
from roastshot.orchestrator import (
    Credentials,
    RoastOrchestrator,
    RoastRequest,
    build_request_body,
    result_from_text,
    validate_tone,
)

PNG_URL = "data:image/png;base64,iVBORw0KGgo="


def _orchestrator(envelope=None, side_effect=None) -> tuple[RoastOrchestrator, AsyncMock]:
    model_client = AsyncMock()
    model_client.respond = AsyncMock(return_value=envelope, side_effect=side_effect)
    return RoastOrchestrator(model_client, "gpt-4o-mini"), model_client


# ── credentials ───────────────────────────────────────────────────────────────


def test_header_key_wins_over_default():
    assert Credentials(header_key=" sk-user ", default_key="sk-env").resolve() == "sk-user"


def test_default_key_used_when_header_blank():
    assert Credentials(header_key="   ", default_key="sk-env").resolve() == "sk-env"


def test_missing_both_keys_raises():
    with pytest.raises(MissingCredential):
        Credentials().resolve()


# ── tone ──────────────────────────────────────────────────────────────────────


def test_tone_defaults_to_brutal():
    assert validate_tone(None) == DEFAULT_TONE


@pytest.mark.parametrize("tone", ["", "x" * 41, 5])
def test_invalid_tones_rejected(tone):
    with pytest.raises(InvalidRequest):
        validate_tone(tone)


def test_forty_char_tone_allowed():
    assert validate_tone("x" * 40) == "x" * 40


# ── request body ──────────────────────────────────────────────────────────────


def test_request_body_has_system_and_user_turns():
    body = build_request_body("gpt-4o-mini", "Aussie", decode(PNG_URL))

    assert body["model"] == "gpt-4o-mini"
    assert body["text"] == RESPONSE_FORMAT
    system, user = body["input"]
    assert system["role"] == "system"
    assert system["content"] == [{"type": "input_text", "text": SYSTEM_PROMPT}]
    assert user["role"] == "user"
    instruction, image = user["content"]
    assert instruction["type"] == "input_text"
    assert "Tone: Aussie." in instruction["text"]
    assert "roast, chaosScore, tags" in instruction["text"]
    assert "max 4 lines" in instruction["text"]
    assert image == {"type": "input_image", "image_url": PNG_URL}


# ── degraded results ──────────────────────────────────────────────────────────


def test_empty_text_gives_placeholder():
    assert result_from_text("") == RoastResult(roast=MSG_NO_TEXT_ROAST, chaos_score=None, tags=())


def test_non_json_text_is_used_verbatim():
    assert result_from_text("Nice wallpaper, grandma.") == RoastResult(roast="Nice wallpaper, grandma.")


@pytest.mark.parametrize("text", ["NaN", '{"roast": "ok", "chaosScore": Infinity}'])
def test_non_standard_json_constants_are_used_verbatim(text):
    assert result_from_text(text) == RoastResult(roast=text)


def test_oversized_integer_score_does_not_break_the_roast():
    text = '{"roast": "Too many digits.", "chaosScore": %s}' % ("1" * 5000)
    assert result_from_text(text) == RoastResult(roast="Too many digits.")



# ── roast ─────────────────────────────────────────────────────────────────────


async def test_roast_end_to_end():
    orchestrator, model_client = _orchestrator(
        envelope={"output_text": '{"roast":"Nice try.","chaosScore":10,"tags":["meh"]}'}
    )

    result = await orchestrator.roast(
        RoastRequest(image_data_url=PNG_URL, tone="Friendly"),
        Credentials(default_key="sk-env"),
    )

    assert result.to_payload() == {"roast": "Nice try.", "chaosScore": 10, "tags": ["meh"]}
    body, api_key = model_client.respond.call_args.args
    assert api_key == "sk-env"
    assert "Tone: Friendly." in body["input"][1]["content"][0]["text"]


async def test_roast_uses_nested_output_blocks():
    orchestrator, _ = _orchestrator(
        envelope={
            "output": [
                {"content": [{"type": "output_text", "text": '{"roast":"Wow.","chaosScore":99.0,"tags":[]}'}]}
            ]
        }
    )

    result = await orchestrator.roast(RoastRequest(PNG_URL), Credentials(default_key="k"))

    assert result == RoastResult(roast="Wow.", chaos_score=99, tags=())


async def test_roast_with_nothing_extractable_is_soft_success():
    orchestrator, _ = _orchestrator(envelope={"status": "completed"})

    result = await orchestrator.roast(RoastRequest(PNG_URL), Credentials(default_key="k"))

    assert result.roast == MSG_NO_TEXT_ROAST
    assert result.chaos_score is None
    assert result.tags == ()


async def test_roast_with_non_json_text_is_soft_success():
    orchestrator, _ = _orchestrator(envelope={"output_text": "just words"})

    result = await orchestrator.roast(RoastRequest(PNG_URL), Credentials(default_key="k"))

    assert result == RoastResult(roast="just words")


async def test_invalid_image_fails_before_network_call():
    orchestrator, model_client = _orchestrator(envelope={})

    with pytest.raises(InvalidImage):
        await orchestrator.roast(RoastRequest("data:text/plain;base64,AAAA"), Credentials(default_key="k"))

    model_client.respond.assert_not_called()


async def test_invalid_tone_fails_before_network_call():
    orchestrator, model_client = _orchestrator(envelope={})

    with pytest.raises(InvalidRequest):
        await orchestrator.roast(RoastRequest(PNG_URL, tone=""), Credentials(default_key="k"))

    model_client.respond.assert_not_called()


async def test_missing_credential_fails_before_network_call():
    orchestrator, model_client = _orchestrator(envelope={})

    with pytest.raises(MissingCredential):
        await orchestrator.roast(RoastRequest(PNG_URL), Credentials())

    model_client.respond.assert_not_called()


async def test_upstream_error_propagates_without_retry():
    orchestrator, model_client = _orchestrator(side_effect=UpstreamError(401, '{"error": "bad key"}'))

    with pytest.raises(UpstreamError) as excinfo:
        await orchestrator.roast(RoastRequest(PNG_URL), Credentials(default_key="k"))

    assert excinfo.value.status == 401
    assert excinfo.value.body == '{"error": "bad key"}'
    model_client.respond.assert_called_once()
