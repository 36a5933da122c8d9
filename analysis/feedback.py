from __future__ import annotations  # Feedback agent asking the generator for a structured critique

import json
import logging
from textwrap import dedent
from typing import Dict, Optional, Sequence, Type

from config import LlmRoute
from llm_gateway import AsyncHttpClient, LlmGatewayError, generate

from .errors import ValidationFailure
from .types import (
    SUPPORTED_LANGUAGES,
    ChatTurn,
    FeedbackDegraded,
    FeedbackOutcome,
    FeedbackPayload,
    FeedbackSuccess,
    TechnicalMetrics,
)


logger = logging.getLogger(__name__)

FAST_WPM = 160  # Pace above this reads as rushed
SLOW_WPM = 110  # Pace below this reads as hesitant

DEGRADED_ERROR = "Analysis generation failed."

_LOCALES: Dict[str, Dict[str, str]] = {
    "en": {"feedback": "ENGLISH", "market": "English-speaking"},
    "es": {"feedback": "SPANISH", "market": "Spanish-speaking"},
}

FEEDBACK_PROMPT = dedent(
    """
    You are an advanced dual-expert AI system evaluating a software engineering job interview.

    INPUT DATA:
    - Language Context: {feedback_lang}
    - Audio Metrics: {metrics}
    - Transcript:
    {conversation}

    INSTRUCTIONS:
    Analyze the candidate performance assuming TWO DISTINCT EXPERT ROLES.

    *** CRITICAL INSTRUCTION ***
    The CONTENT of your JSON response (summaries, feedback, advice) MUST BE IN {feedback_lang}.
    ****************************

    ---
    ROLE 1: PUBLIC SPEAKING COACH
    Objective: Evaluate delivery, structure, and clarity.

    KNOWLEDGE BASE:
    1. Toulmin Model: Does the student connect Data -> Warrant -> Claim?
    2. Cohesion: Penalize circumlocution. Reward conciseness.
    3. Confidence: Detect hedging ("I think", "maybe") vs. assertive language.
    4. Pacing: Analyze WPM ({wpm}). Is it too fast (>{fast_wpm}) or too slow (<{slow_wpm})?
       Pause percentage is {pause_percentage}%.

    ---
    ROLE 2: SENIOR FAANG RECRUITER ({market} context)
    Objective: Evaluate technical competence and behavioral fit.

    KNOWLEDGE BASE:
    1. STAR Method: Checks for Situation, Task, Action, Result in behavioral answers.
    2. Ownership: Looks for "I implemented" vs "We/It happened".
    3. Red Flags: Inconsistencies, lack of depth, or defensiveness.

    ---
    OUTPUT JSON FORMAT (Response must be valid JSON only):
    {{
        "oratory_expert": {{
            "score": number (0-100),
            "summary": "Executive summary of communication style ({feedback_lang}).",
            "strengths": ["point 1", "point 2"],
            "weaknesses": ["point 1", "point 2"],
            "pacing_feedback": "Specific feedback on pace and pauses ({feedback_lang})."
        }},
        "recruiter_verdict": {{
            "passed": boolean,
            "decision_rationale": "Professional justification for hiring decision ({feedback_lang}).",
            "star_method_check": "Did they use STAR? Analysis ({feedback_lang}).",
            "soft_skills": ["skill 1", "skill 2"],
            "red_flags": ["flag 1"]
        }},
        "improvement_plan": {{
            "immediate_action": "Top 1 tip to apply immediately ({feedback_lang}).",
            "long_term_advice": "Career development advice ({feedback_lang})."
        }}
    }}
    """
).strip()


def build_prompt(history: Sequence[ChatTurn], metrics: TechnicalMetrics, language: str) -> str:
    """Render the single prompt sent to the generator."""

    if language not in _LOCALES:
        raise ValidationFailure(f"Unsupported language '{language}'; expected one of {SUPPORTED_LANGUAGES}")
    locale = _LOCALES[language]
    conversation = json.dumps([turn.model_dump() for turn in history], indent=2, ensure_ascii=False)
    return FEEDBACK_PROMPT.format(
        feedback_lang=locale["feedback"],
        market=locale["market"],
        metrics=metrics.model_dump_json(),
        conversation=conversation,
        wpm=metrics.wpm,
        pause_percentage=metrics.pause_percentage,
        fast_wpm=FAST_WPM,
        slow_wpm=SLOW_WPM,
    )


class FeedbackRequester:  # Requests structured interview feedback from the configured route
    def __init__(
        self,
        route: LlmRoute,
        schema: Type[FeedbackPayload] = FeedbackPayload,
        client: Optional[AsyncHttpClient] = None,
    ) -> None:
        self._route = route
        self._schema = schema
        self._client = client

    async def request(
        self,
        history: Sequence[ChatTurn],
        metrics: TechnicalMetrics,
        language: str,
    ) -> FeedbackOutcome:
        """Ask the generator once; upstream and parse failures come back degraded."""

        prompt = build_prompt(history, metrics, language)
        try:
            payload = await generate(prompt, self._schema, cfg=self._route, client=self._client)
        except LlmGatewayError as exc:
            details = _describe(exc)
            logger.error("Feedback generation degraded: %s", details)
            return FeedbackDegraded(error=DEGRADED_ERROR, details=details, fallback_metrics=metrics)
        return FeedbackSuccess(payload=payload)


def _describe(exc: BaseException) -> str:  # Error message including the wrapped cause
    cause = exc.__cause__
    if cause is not None and str(cause):
        return f"{exc}: {cause}"
    return str(exc)


__all__ = ["DEGRADED_ERROR", "FeedbackRequester", "build_prompt"]
