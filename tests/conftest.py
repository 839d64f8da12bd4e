"""Shared test fixtures."""

from __future__ import annotations

import asyncio
import json
import uuid
from datetime import date
from pathlib import Path
from typing import Any, TypeVar

import pytest
from pydantic import BaseModel

from newslens.analysis import AnalysisClient
from newslens.config import Settings
from newslens.gemini import GeminiClient
from newslens.models import AnalysisResult, InputType, derive_verdict
from newslens.session import AnalysisSession
from newslens.storage import MemoryStore

T = TypeVar("T", bound=BaseModel)

FLAT_EARTH = "Scientists confirm the earth is flat and NASA is lying to everyone!!!"
TODAY = date(2026, 3, 4)


class MockGeminiClient:
    """A mock Gemini client that returns pre-configured responses.

    Dict responses are serialized and parsed like a real JSON body, so schema
    failures surface exactly as they would from the API. Exception instances
    are raised.
    """

    def __init__(self) -> None:
        self.call_count = 0
        self.calls: list[dict[str, Any]] = []
        self._responses: list[Any] = []
        self._response_index = 0

    def set_responses(self, responses: list[Any]) -> None:
        self._responses = responses
        self._response_index = 0

    async def generate(
        self,
        contents: Any,
        *,
        system_instruction: str | None = None,
        response_model: type[T] | None = None,
        temperature: float | None = None,
    ) -> str | T:
        self.call_count += 1
        self.calls.append(
            {
                "contents": contents,
                "system_instruction": system_instruction,
                "response_model": response_model,
                "temperature": temperature,
            }
        )

        resp: Any = ""
        if self._response_index < len(self._responses):
            resp = self._responses[self._response_index]
            self._response_index += 1

        if isinstance(resp, BaseException):
            raise resp
        if response_model is None:
            return resp
        body = json.dumps(resp) if isinstance(resp, dict) else resp
        return GeminiClient.parse_response(body, response_model)


class GatedAnalyzer:
    """Analyzer that blocks until released, for in-flight behaviour."""

    def __init__(self) -> None:
        self.calls = 0
        self.release = asyncio.Event()

    async def analyze(self, text: str, input_type: InputType) -> AnalysisResult:
        self.calls += 1
        await self.release.wait()
        return make_result(text, input_type, score=50)


def make_payload(**overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "score": 92,
        "verdict": "Likely Fake",
        "highlights": [
            {"text": "the earth is flat", "rationale": "Unverified Claim"},
            {"text": "NASA is lying to everyone!!!", "rationale": "Sensational Language"},
        ],
        "confidence": 0.9,
        "summary": "The claim contradicts established science and uses sensational language.",
        "nextSteps": [
            {"name": "Snopes", "url": "https://www.snopes.com"},
            {"name": "AP Fact Check", "url": "https://apnews.com/hub/ap-fact-check"},
        ],
    }
    payload.update(overrides)
    return payload


def make_result(text: str, input_type: InputType, score: int = 10) -> AnalysisResult:
    return AnalysisResult(
        id=uuid.uuid4().hex,
        timestamp="2026-03-04T10:00:00+00:00",
        score=score,
        verdict=derive_verdict(score),
        confidence=0.5,
        summary="Stub result.",
        input_text=text,
        input_type=input_type,
    )


@pytest.fixture
def mock_client() -> MockGeminiClient:
    return MockGeminiClient()


@pytest.fixture
def sample_settings(tmp_path: Path) -> Settings:
    return Settings(
        gemini_api_key="test-key",
        model_id="test-model",
        store_path=str(tmp_path / "store.json"),
    )


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def analyzer(mock_client: MockGeminiClient, sample_settings: Settings) -> AnalysisClient:
    return AnalysisClient(mock_client, sample_settings)  # type: ignore[arg-type]


@pytest.fixture
def session(
    analyzer: AnalysisClient, memory_store: MemoryStore, sample_settings: Settings
) -> AnalysisSession:
    s = AnalysisSession(analyzer, memory_store, sample_settings, today=lambda: TODAY)
    s.load()
    return s
