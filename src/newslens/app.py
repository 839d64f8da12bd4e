"""Command-line entry point: analyze text, list history, show weekly activity."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from newslens.analysis import AnalysisClient
from newslens.config import Settings
from newslens.errors import AnalysisError, InputValidationError
from newslens.gemini import GeminiClient
from newslens.models import AnalysisResult, InputType
from newslens.session import AnalysisSession
from newslens.storage import JsonFileStore, KeyValueStore

logger = logging.getLogger(__name__)


class _LazyAnalyzer:
    """Builds the Gemini client on first use so read-only commands need no API key."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        self._analyzer: AnalysisClient | None = None

    async def analyze(self, text: str, input_type: InputType) -> AnalysisResult:
        if self._analyzer is None:
            self._analyzer = AnalysisClient(GeminiClient(self._settings), self._settings)
        return await self._analyzer.analyze(text, input_type)


def build_session(settings: Settings, store: KeyValueStore | None = None) -> AnalysisSession:
    """Wire the analysis client and store into a loaded session."""
    store = store or JsonFileStore(settings.store_path)
    session = AnalysisSession(_LazyAnalyzer(settings), store, settings)
    session.load()
    return session


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="newslens", description="Misinformation check for news text.")
    sub = parser.add_subparsers(dest="command", required=True)

    analyze = sub.add_parser("analyze", help="analyze a headline or article")
    analyze.add_argument("text", help="text to analyze, or - to read stdin")
    analyze.add_argument(
        "--type",
        dest="input_type",
        default=InputType.SHORT_ARTICLE.value,
        choices=[t.value for t in InputType],
    )

    sub.add_parser("history", help="list recent analyses")
    sub.add_parser("stats", help="analyses per day over the last week")
    return parser


def _print_history(session: AnalysisSession) -> None:
    if not session.history:
        print("No analyses yet.")
        return
    for entry in session.history:
        preview = entry.input_text.replace("\n", " ")
        if len(preview) > 60:
            preview = preview[:57] + "..."
        print(f"{entry.id[:8]}  {entry.timestamp}  {entry.score:3d}  {entry.verdict.value:<14}  {preview}")


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    args = _parser().parse_args(argv)
    settings = Settings.from_env()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "analyze" and not settings.gemini_api_key:
        raise SystemExit("GEMINI_API_KEY environment variable is required")

    session = build_session(settings)

    if args.command == "history":
        _print_history(session)
        return 0

    if args.command == "stats":
        print(session.weekly_activity().model_dump_json(indent=2))
        return 0

    text = sys.stdin.read() if args.text == "-" else args.text
    try:
        result = asyncio.run(session.submit(text, args.input_type))
    except InputValidationError as exc:
        print(exc, file=sys.stderr)
        return 2
    except AnalysisError:
        print(session.error_message, file=sys.stderr)
        return 1

    print(result.model_dump_json(indent=2, by_alias=True))
    return 0


if __name__ == "__main__":
    sys.exit(main())
