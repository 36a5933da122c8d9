import json
import os
import sys
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("ENABLE_FILE_LOGS", "0")

from analysis.feedback import FeedbackRequester
from analysis.types import TimedWord
from config import AppConfig, LlmRoute, Settings, SpeechRoute
from services.composer import SessionComposer
from services.sessions import SessionService
from speech import Transcriber
from storage import SessionStore

ANSWER_WORDS = ["I", "think", "I", "implemented", "the", "caching", "layer", "myself"]
ANSWER_TEXT = " ".join(ANSWER_WORDS)


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, text: str = "") -> None:
        self.status_code = status_code
        self._payload = payload
        self.text = text or json.dumps(payload)

    def json(self) -> Any:
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class FakeLlmClient:
    """Stands in for the generator endpoint; replies with ``reply`` text or raises ``error``."""

    def __init__(self, reply: Optional[str] = None, *, error: Optional[Exception] = None, status_code: int = 200) -> None:
        self.reply = reply
        self.error = error
        self.status_code = status_code
        self.calls: List[Dict[str, Any]] = []

    async def post(self, url: str, *, json: Dict[str, Any], headers: Dict[str, str], timeout: float) -> FakeResponse:
        self.calls.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        if self.error is not None:
            raise self.error
        body = {"candidates": [{"content": {"role": "model", "parts": [{"text": self.reply or ""}]}}]}
        return FakeResponse(self.status_code, body)

    @property
    def prompt(self) -> str:
        return self.calls[-1]["json"]["contents"][0]["parts"][0]["text"]


class FakeSpeechClient:
    def __init__(self, payload: Any = None, *, error: Optional[Exception] = None, status_code: int = 200) -> None:
        self.payload = payload
        self.error = error
        self.status_code = status_code
        self.calls: List[Dict[str, Any]] = []

    async def post(
        self,
        url: str,
        *,
        content: bytes,
        params: Dict[str, str],
        headers: Dict[str, str],
        timeout: float,
    ) -> FakeResponse:
        self.calls.append({"url": url, "content": content, "params": params, "headers": headers})
        if self.error is not None:
            raise self.error
        return FakeResponse(self.status_code, self.payload)


def answer_words() -> List[TimedWord]:
    """Eight words over six seconds with a single two second gap after the fourth."""

    words: List[TimedWord] = []
    for index, token in enumerate(ANSWER_WORDS):
        start = index * 0.5 if index < 4 else 4.0 + (index - 4) * 0.5
        words.append(TimedWord(word=token, start=start, end=start + 0.5, confidence=0.9))
    return words


def deepgram_payload(
    transcript: str = ANSWER_TEXT,
    words: Optional[List[TimedWord]] = None,
    *,
    duration: float = 12.0,
    confidence: float = 0.9342,
) -> Dict[str, Any]:
    words = answer_words() if words is None else words
    return {
        "metadata": {"request_id": "req-1", "duration": duration, "channels": 1},
        "results": {
            "channels": [
                {
                    "alternatives": [
                        {
                            "transcript": transcript,
                            "confidence": confidence,
                            "words": [
                                {
                                    "word": w.word.lower(),
                                    "start": w.start,
                                    "end": w.end,
                                    "confidence": w.confidence,
                                    "punctuated_word": w.word,
                                }
                                for w in words
                            ],
                        }
                    ]
                }
            ]
        },
    }


def feedback_body(score: float = 72, passed: bool = True) -> Dict[str, Any]:
    return {
        "oratory_expert": {
            "score": score,
            "summary": "Clear and mostly direct.",
            "strengths": ["Concrete example"],
            "weaknesses": ["Hedging at the start"],
            "pacing_feedback": "Pace is slow; tighten the pauses.",
        },
        "recruiter_verdict": {
            "passed": passed,
            "decision_rationale": "Shows ownership of the caching work.",
            "star_method_check": "Action present, result missing.",
            "soft_skills": ["Ownership"],
            "red_flags": [],
        },
        "improvement_plan": {
            "immediate_action": "Open with the result.",
            "long_term_advice": "Practice structured answers.",
        },
    }


@pytest.fixture
def db_path():
    with tempfile.TemporaryDirectory() as td:
        yield Path(td) / "sessions.db"


@pytest.fixture
def test_settings(db_path: Path) -> Settings:
    return Settings(_env_file=None, DB_PATH=str(db_path))


@pytest.fixture
def store(db_path: Path) -> SessionStore:
    store = SessionStore(db_path)
    store.initialize()
    return store


@pytest.fixture
def llm_client() -> FakeLlmClient:
    return FakeLlmClient(json.dumps(feedback_body()))


@pytest.fixture
def speech_client() -> FakeSpeechClient:
    return FakeSpeechClient(deepgram_payload())


@pytest.fixture
def app_config() -> AppConfig:
    return AppConfig(llm=LlmRoute(api_key_env=None), speech=SpeechRoute(api_key_env=None))


@pytest.fixture
def service(
    store: SessionStore,
    app_config: AppConfig,
    llm_client: FakeLlmClient,
    speech_client: FakeSpeechClient,
) -> SessionService:
    service = SessionService()
    service.initialize(
        store=store,
        composer=SessionComposer(FeedbackRequester(app_config.llm, client=llm_client), pause_threshold=0.5),
        transcriber=Transcriber(app_config.speech, client=speech_client),
    )
    return service
