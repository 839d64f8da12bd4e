"""Session manager: analysis lifecycle, bounded history and day-keyed analytics."""

from __future__ import annotations

import asyncio
import json
import logging
from collections import deque
from datetime import date, timedelta
from typing import Any, Callable, Protocol

from pydantic import TypeAdapter, ValidationError

from newslens.config import Settings
from newslens.errors import (
    AnalysisCancelledError,
    AnalysisError,
    InputValidationError,
    PersistenceWriteError,
    SchemaError,
    SubmissionInProgressError,
    TransportError,
)
from newslens.models import (
    AnalysisResult,
    DailyCount,
    InputType,
    SessionState,
    WeeklyActivity,
)
from newslens.storage import ANALYTICS_KEY, HISTORY_KEY, KeyValueStore

logger = logging.getLogger(__name__)

_HISTORY_ADAPTER = TypeAdapter(list[AnalysisResult])
_RAW_HISTORY_ADAPTER = TypeAdapter(list[dict[str, Any]])
_ANALYTICS_ADAPTER = TypeAdapter(dict[str, int])
_WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


class Analyzer(Protocol):
    async def analyze(self, text: str, input_type: InputType) -> AnalysisResult: ...


class AnalysisSession:
    """One user's analysis session.

    States move ``idle -> submitting -> success | failed``; any state returns to
    ``idle`` on :meth:`clear`. At most one analysis is in flight at a time.
    History (most recent first, bounded) and analytics are only mutated when an
    analysis succeeds, and are written to the store right after.
    """

    def __init__(
        self,
        analyzer: Analyzer,
        store: KeyValueStore,
        settings: Settings,
        *,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._analyzer = analyzer
        self._store = store
        self._settings = settings
        self._today = today
        self._history: deque[AnalysisResult] = deque(maxlen=settings.history_limit)
        self._analytics: dict[str, int] = {}
        self._state = SessionState.IDLE
        self._current: AnalysisResult | None = None
        self._error_message: str | None = None
        self._task: asyncio.Task[AnalysisResult] | None = None
        self._cancel_requested = False
        self._generation = 0

    # --- views ---

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def current(self) -> AnalysisResult | None:
        return self._current

    @property
    def error_message(self) -> str | None:
        return self._error_message

    @property
    def history(self) -> list[AnalysisResult]:
        return list(self._history)

    @property
    def analytics(self) -> dict[str, int]:
        return dict(self._analytics)

    @property
    def is_busy(self) -> bool:
        return self._task is not None

    # --- persistence ---

    def load(self) -> None:
        """Read history and analytics from the store. Called once at start-up."""
        self._history.clear()
        raw_history = self._store.get(HISTORY_KEY)
        if raw_history:
            try:
                records = _RAW_HISTORY_ADAPTER.validate_json(raw_history)
            except ValidationError:
                logger.exception("Stored history is unreadable, starting empty")
                records = []
            for record in records:
                if len(self._history) >= self._settings.history_limit:
                    break
                try:
                    self._history.append(AnalysisResult.model_validate(record))
                except ValidationError as exc:
                    logger.error("Dropping invalid history entry %r: %s", record.get("id"), exc)

        self._analytics = {}
        raw_analytics = self._store.get(ANALYTICS_KEY)
        if raw_analytics:
            try:
                self._analytics = _ANALYTICS_ADAPTER.validate_json(raw_analytics)
            except ValidationError:
                logger.exception("Stored analytics are unreadable, starting empty")

        logger.info(
            "Loaded %d history entries and %d analytics days",
            len(self._history),
            len(self._analytics),
        )

    def _persist(self) -> None:
        history_json = _HISTORY_ADAPTER.dump_json(list(self._history), by_alias=True).decode()
        analytics_json = json.dumps(self._analytics, sort_keys=True)
        for key, value in ((HISTORY_KEY, history_json), (ANALYTICS_KEY, analytics_json)):
            try:
                self._store.set(key, value)
            except PersistenceWriteError as exc:
                logger.warning("Could not persist %s: %s", key, exc)

    # --- lifecycle ---

    async def submit(self, text: str, input_type: InputType | str) -> AnalysisResult:
        """Analyze ``text`` and record the result.

        Raises SubmissionInProgressError if another analysis is running,
        InputValidationError for short text, and re-raises the AnalysisError of a
        failed analysis after moving to ``failed``.
        """
        if self._task is not None:
            raise SubmissionInProgressError("An analysis is already in progress.")

        try:
            input_type = InputType(input_type)
        except ValueError:
            choices = ", ".join(t.value for t in InputType)
            self._error_message = f"Please choose an input type: {choices}."
            raise InputValidationError(f"Unknown input type: {input_type!r}") from None
        message = f"Please enter a news article or headline (min {self._settings.min_text_length} chars)."
        if len(text) < self._settings.min_text_length:
            self._error_message = message
            raise InputValidationError(message)

        self._state = SessionState.SUBMITTING
        self._current = None
        self._error_message = None
        self._cancel_requested = False
        generation = self._generation
        self._task = asyncio.ensure_future(self._analyzer.analyze(text, input_type))

        try:
            result = await self._task
        except asyncio.CancelledError:
            if not self._cancel_requested:
                # The caller itself went away; abandon the submission.
                self._fail(generation, AnalysisCancelledError("submission abandoned"))
                raise
            exc = AnalysisCancelledError()
            logger.info("Analysis cancelled by user")
            self._fail(generation, exc)
            raise exc from None
        except TransportError as exc:
            logger.warning("Analysis failed, provider unavailable: %s", exc)
            self._fail(generation, exc)
            raise
        except SchemaError as exc:
            logger.warning("Analysis failed, unusable response: %s", exc)
            self._fail(generation, exc)
            raise
        except AnalysisError as exc:
            logger.warning("Analysis failed: %s", exc)
            self._fail(generation, exc)
            raise
        except Exception:
            logger.exception("Unexpected analysis failure")
            self._fail(generation, AnalysisError("unexpected failure"))
            raise
        finally:
            self._task = None

        self._record(result)
        if generation == self._generation:
            self._current = result
            self._state = SessionState.SUCCESS
        return result

    def _fail(self, generation: int, exc: AnalysisError) -> None:
        if generation != self._generation:
            return
        self._state = SessionState.FAILED
        self._error_message = exc.user_message

    def _record(self, result: AnalysisResult) -> None:
        self._history.appendleft(result)
        day = self._today()
        key = day.isoformat()
        self._analytics[key] = self._analytics.get(key, 0) + 1
        self._apply_retention(day)
        self._persist()

    def _apply_retention(self, today: date) -> None:
        days = self._settings.analytics_retention_days
        if days <= 0:
            return
        cutoff = today - timedelta(days=days)
        self._analytics = {
            key: count
            for key, count in self._analytics.items()
            if _parse_date(key, today) >= cutoff
        }

    def cancel(self) -> bool:
        """Cancel the in-flight analysis, if any."""
        if self._task is None or self._task.done():
            return False
        self._cancel_requested = True
        return self._task.cancel()

    def load_from_history(self, result_id: str) -> AnalysisResult:
        """Show a past result again. Never calls the model or touches history."""
        if self._task is not None:
            raise SubmissionInProgressError("An analysis is already in progress.")
        for entry in self._history:
            if entry.id == result_id:
                self._current = entry
                self._state = SessionState.SUCCESS
                self._error_message = None
                return entry
        raise KeyError(result_id)

    def clear(self) -> None:
        self._generation += 1
        self._state = SessionState.IDLE
        self._current = None
        self._error_message = None

    # --- dashboard ---

    def weekly_activity(self, today: date | None = None) -> WeeklyActivity:
        """Counts for the seven days ending ``today``, oldest first."""
        today = today or self._today()
        days: list[DailyCount] = []
        for offset in range(6, -1, -1):
            day = today - timedelta(days=offset)
            key = day.isoformat()
            days.append(
                DailyCount(day=key, label=_WEEKDAYS[day.weekday()], count=self._analytics.get(key, 0))
            )
        return WeeklyActivity(days=days, total=sum(d.count for d in days))


def _parse_date(date_str: str, fallback: date) -> date:
    try:
        return date.fromisoformat(date_str)
    except (ValueError, TypeError):
        return fallback
