"""Pydantic data models for analysis requests, results and session views."""

from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

# --- Enums ---


class InputType(str, Enum):
    HEADLINE = "Headline"
    SHORT_ARTICLE = "Short article (<=500 words)"
    LONG_ARTICLE = "Long article"

    @classmethod
    def _missing_(cls, value: object) -> InputType | None:
        # Accept the bare "Short article" label and case differences.
        if isinstance(value, str):
            wanted = value.strip().lower()
            for member in cls:
                if member.value.lower() == wanted:
                    return member
            if wanted == "short article":
                return cls.SHORT_ARTICLE
        return None


class Verdict(str, Enum):
    LIKELY_REAL = "Likely Real"
    POSSIBLY_FALSE = "Possibly False"
    LIKELY_FAKE = "Likely Fake"


class SessionState(str, Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    SUCCESS = "success"
    FAILED = "failed"


def derive_verdict(score: float) -> Verdict:
    """Map a 0-100 fake-probability score onto its verdict band."""
    if score < 0 or score > 100:
        raise ValueError(f"score out of range: {score}")
    if score <= 33:
        return Verdict.LIKELY_REAL
    if score <= 66:
        return Verdict.POSSIBLY_FALSE
    return Verdict.LIKELY_FAKE


# --- Model response ---


class Highlight(BaseModel):
    text: str = Field(description="A direct quote from the article that is a strong indicator.")
    rationale: str = Field(
        description="A brief explanation for why this text is an indicator (e.g., 'Sensational Language')."
    )


class NextStep(BaseModel):
    name: str
    url: str


class AnalysisPayload(BaseModel):
    """Exactly what the model is asked to return. Every field is required."""

    model_config = ConfigDict(populate_by_name=True)

    score: float = Field(
        ge=0,
        le=100,
        description="Probability from 0 to 100 that the text is FAKE news. 0 is likely real, 100 is likely fake.",
    )
    verdict: Verdict = Field(description="The final verdict based on the score.")
    highlights: list[Highlight] = Field(
        description="The top 3 most indicative phrases or sentences from the text that contributed to the verdict."
    )
    confidence: float = Field(
        ge=0.0,
        le=1.0,
        description="Confidence between 0.0 and 1.0 in the analysis.",
    )
    summary: str = Field(
        description="A 1-2 sentence summary explaining the reasoning behind the verdict, referencing the highlights."
    )
    next_steps: list[NextStep] = Field(
        alias="nextSteps",
        description="2-3 suggested next steps, like links to reputable fact-checking websites.",
    )


# --- Stored result ---


class AnalysisResult(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    timestamp: str  # ISO-8601
    score: int = Field(ge=0, le=100)
    verdict: Verdict
    highlights: tuple[Highlight, ...] = ()
    confidence: float = Field(ge=0.0, le=1.0)
    summary: str = ""
    next_steps: tuple[NextStep, ...] = Field(default=(), alias="nextSteps")
    input_text: str = Field(alias="inputText")
    input_type: InputType = Field(alias="inputType")

    @model_validator(mode="after")
    def _verdict_matches_score(self) -> AnalysisResult:
        expected = derive_verdict(self.score)
        if self.verdict is not expected:
            raise ValueError(
                f"verdict {self.verdict.value!r} does not match score {self.score} ({expected.value!r})"
            )
        return self


# --- Dashboard ---


class DailyCount(BaseModel):
    day: str  # YYYY-MM-DD
    label: str  # short weekday name
    count: int = 0


class WeeklyActivity(BaseModel):
    days: list[DailyCount] = Field(default_factory=list)
    total: int = 0


# --- Chat ---


class ChatMessage(BaseModel):
    sender: Literal["user", "ai"]
    text: str
