"""Configuration loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class Settings:
    gemini_api_key: str = ""
    model_id: str = "gemini-2.5-flash"
    temperature: float = 0.3
    min_text_length: int = 20
    history_limit: int = 10
    analytics_retention_days: int = 0  # 0 keeps every day
    store_path: str = "data/newslens.json"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> Settings:
        return cls(
            gemini_api_key=os.environ.get("GEMINI_API_KEY") or os.environ.get("API_KEY", ""),
            model_id=os.environ.get("GEMINI_MODEL_ID", "gemini-2.5-flash"),
            temperature=float(os.environ.get("ANALYSIS_TEMPERATURE", "0.3")),
            min_text_length=int(os.environ.get("MIN_TEXT_LENGTH", "20")),
            history_limit=int(os.environ.get("HISTORY_LIMIT", "10")),
            analytics_retention_days=int(os.environ.get("ANALYTICS_RETENTION_DAYS", "0")),
            store_path=os.environ.get("STORE_PATH", "data/newslens.json"),
            log_level=os.environ.get("LOG_LEVEL", "INFO"),
        )
