import asyncio
import json

import pytest

from analysis.errors import ValidationFailure
from analysis.feedback import FeedbackRequester
from analysis.types import ChatTurn, Transcription
from config import LlmRoute
from conftest import ANSWER_TEXT, FakeLlmClient, answer_words, feedback_body
from services.composer import ANSWER_ROLE, SessionComposer

TRANSCRIPTION = Transcription(
    transcript=ANSWER_TEXT,
    words=answer_words(),
    confidence=0.9342,
    duration_seconds=12.0,
)


def _composer(client, ids=None):
    ids = iter(ids or ["sess-1", "sess-2"])
    return SessionComposer(
        FeedbackRequester(LlmRoute(api_key_env=None), client=client),
        pause_threshold=0.5,
        clock=lambda: "2026-01-01T00:00:00+00:00",
        id_factory=lambda: next(ids),
    )


def test_compose_builds_complete_record():
    client = FakeLlmClient(json.dumps(feedback_body()))
    history = [ChatTurn(role="interviewer", text="What did you build?")]

    record = asyncio.run(_composer(client).compose(TRANSCRIPTION, history, "en", user_id="alice"))

    assert record.session_id == "sess-1"
    assert record.user_id == "alice"
    assert record.created_at == "2026-01-01T00:00:00+00:00"
    assert record.metrics.wpm == 40.0
    assert record.metrics.pause_percentage == 16.7
    assert record.feedback.kind == "success"
    assert record.context_used == [{"index": 0, "role": "interviewer"}]
    assert len(record.words) == 8


def test_latest_answer_is_appended_without_mutating_history():
    client = FakeLlmClient(json.dumps(feedback_body()))
    history = [ChatTurn(role="interviewer", text="What did you build?")]

    asyncio.run(_composer(client).compose(TRANSCRIPTION, history, "en", user_id="alice"))

    assert len(history) == 1
    prompt = client.prompt
    assert prompt.index("What did you build?") < prompt.index(ANSWER_TEXT)
    assert f'"role": "{ANSWER_ROLE}"' in prompt


def test_metrics_feed_the_prompt():
    client = FakeLlmClient(json.dumps(feedback_body()))

    asyncio.run(_composer(client).compose(TRANSCRIPTION, [], "en", user_id="alice"))

    assert "Analyze WPM (40.0)" in client.prompt


def test_each_composition_gets_a_fresh_id():
    client = FakeLlmClient(json.dumps(feedback_body()))
    composer = _composer(client)

    first = asyncio.run(composer.compose(TRANSCRIPTION, [], "en", user_id="alice"))
    second = asyncio.run(composer.compose(TRANSCRIPTION, [], "en", user_id="alice"))

    assert (first.session_id, second.session_id) == ("sess-1", "sess-2")


def test_generator_failure_still_composes():
    client = FakeLlmClient(error=TimeoutError("deadline exceeded"))

    record = asyncio.run(_composer(client).compose(TRANSCRIPTION, [], "es", user_id="bob"))

    assert record.feedback.kind == "degraded"
    assert record.feedback.fallback_metrics == record.metrics


def test_unsupported_language_rejected_before_generation():
    client = FakeLlmClient(json.dumps(feedback_body()))

    with pytest.raises(ValidationFailure):
        asyncio.run(_composer(client).compose(TRANSCRIPTION, [], "de", user_id="alice"))
    assert client.calls == []
