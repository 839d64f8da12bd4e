"""Analysis client: shape the prompt, call Gemini, validate and stamp the result."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Callable

from newslens.config import Settings
from newslens.gemini import GeminiClient
from newslens.models import (
    AnalysisPayload,
    AnalysisResult,
    InputType,
    derive_verdict,
)

logger = logging.getLogger(__name__)

SYSTEM_INSTRUCTION = """You are an advanced AI assistant, "VeriNews", designed to detect fake news.
Analyze the user-provided text based on its type (Headline, Short article, or Long article).
Your analysis must identify markers of misinformation such as sensationalism, emotional language, lack of sources, logical fallacies, and loaded questions.
Provide a clear verdict, a probability score (0-100) of the text being FAKE, and actionable next steps.
The highlights must be direct quotes from the text, and each must have a brief, clear rationale explaining why it's a red flag (e.g., "Sensational Language", "Unverified Claim", "Ad Hominem Attack").
The final verdict must be based on the score: 0-33 is 'Likely Real', 34-66 is 'Possibly False', 67-100 is 'Likely Fake'.
Respond ONLY with a valid JSON object matching the provided schema. Do not add any extra text or commentary."""


def build_user_prompt(text: str, input_type: InputType) -> str:
    return f"Analyze the following '{input_type.value}': \"{text}\""


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class AnalysisClient:
    def __init__(
        self,
        client: GeminiClient,
        settings: Settings,
        *,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._client = client
        self._settings = settings
        self._clock = clock

    async def analyze(self, text: str, input_type: InputType | str) -> AnalysisResult:
        """Assess ``text`` for misinformation markers.

        Raises TransportError or SchemaError (both AnalysisError) on failure.
        """
        input_type = InputType(input_type)
        payload = await self._client.generate(
            build_user_prompt(text, input_type),
            system_instruction=SYSTEM_INSTRUCTION,
            response_model=AnalysisPayload,
            temperature=self._settings.temperature,
        )
        return self._to_result(payload, text, input_type)

    def _to_result(
        self, payload: AnalysisPayload, text: str, input_type: InputType
    ) -> AnalysisResult:
        score = int(round(payload.score))
        verdict = derive_verdict(score)
        if verdict != payload.verdict:
            logger.warning(
                "Model verdict %r disagrees with score %d, using %r",
                payload.verdict.value,
                score,
                verdict.value,
            )

        for highlight in payload.highlights:
            if highlight.text not in text:
                logger.debug("Highlight is not a verbatim quote: %r", highlight.text)

        result = AnalysisResult(
            id=uuid.uuid4().hex,
            timestamp=self._clock().isoformat(),
            score=score,
            verdict=verdict,
            highlights=tuple(payload.highlights),
            confidence=payload.confidence,
            summary=payload.summary,
            next_steps=tuple(payload.next_steps),
            input_text=text,
            input_type=input_type,
        )
        logger.info(
            "Analysis %s: score=%d verdict=%s highlights=%d",
            result.id[:8],
            result.score,
            result.verdict.value,
            len(result.highlights),
        )
        return result
