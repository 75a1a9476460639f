"""Command-line keyword search over a JSON file of records.

Examples:
  record-search "hello world" --records records.json
  record-search hello --records records.json --max-results 5 --json
  record-search Hello --records records.json --case-sensitive --no-nested
"""

# ruff: noqa: T201  # CLI intentionally prints results

from __future__ import annotations

import argparse
from collections.abc import Sequence
import logging
from pathlib import Path
import sys
from typing import Any

import orjson

from record_search.config import Settings
from record_search.domain.search import SearchResult
from record_search.observability.logging import configure_logging
from record_search.observability.metrics import init_metrics
from record_search.observability.tracing import init_tracing
from record_search.search.engine import KeywordSearch
from record_search.utils.text_formatter import format_text_punctuation


logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_NO_MATCHES = 1
EXIT_BAD_INPUT = 2


class RecordsFileError(ValueError):
    """Raised when the records file cannot be read as a JSON array."""


def build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="record-search",
        description="Rank JSON records against a free-text query",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__.split("Examples:", 1)[1].rstrip() if __doc__ else None,
    )
    parser.add_argument("query", help="Search text; whitespace separates keywords")
    parser.add_argument(
        "--records",
        type=Path,
        required=True,
        help="Path to a JSON file holding an array of records (a single object is also accepted)",
    )
    parser.add_argument("--case-sensitive", action="store_true", default=None, help="Match without case folding")
    parser.add_argument("--max-results", type=int, default=None, help="Maximum records returned (default: 50)")
    parser.add_argument("--no-collections", action="store_true", help="Skip list-of-string fields")
    parser.add_argument("--no-nested", action="store_true", help="Skip nested object fields")
    parser.add_argument(
        "--normalize-punctuation",
        action="store_true",
        help="Separate punctuation from words before matching",
    )
    parser.add_argument("--json", action="store_true", dest="json_output", help="Print results as JSON")
    parser.add_argument("--log-level", default=None, help="Log level (default: RECORD_SEARCH_LOG_LEVEL or info)")
    return parser


def load_records(path: Path) -> list[Any]:
    """Load records from a JSON file."""
    try:
        payload = orjson.loads(path.read_bytes())
    except OSError as exc:
        msg = f"Cannot read {path}: {exc}"
        raise RecordsFileError(msg) from exc
    except orjson.JSONDecodeError as exc:
        msg = f"Invalid JSON in {path}: {exc}"
        raise RecordsFileError(msg) from exc

    if isinstance(payload, dict):
        return [payload]
    if not isinstance(payload, list):
        msg = f"{path} must contain a JSON array of records, got {type(payload).__name__}"
        raise RecordsFileError(msg)
    return payload


def render_table(result: SearchResult, records: Sequence[Any]) -> str:
    """Render a result as plain text, one block per ranked record."""
    positions = {id(record): index for index, record in enumerate(records)}
    lines: list[str] = []
    for rank_index, match in enumerate(result.matches(), start=1):
        lines.append(f"{rank_index:>3}. record #{positions.get(id(match.record), '?')}  score={match.score:.3f}")
        for label, text in match.provenance:
            lines.append(f"       {label} {text}")
    return "\n".join(lines)


def render_json(result: SearchResult, records: Sequence[Any]) -> bytes:
    positions = {id(record): index for index, record in enumerate(records)}
    payload = [
        {
            "index": positions.get(id(match.record)),
            "score": match.score,
            "provenance": [{"label": label, "text": text} for label, text in match.provenance],
            "record": match.record,
        }
        for match in result.matches()
    ]
    return orjson.dumps(payload, option=orjson.OPT_INDENT_2)


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_argument_parser()
    args = parser.parse_args(argv)

    overrides: dict[str, Any] = {}
    if args.no_collections:
        overrides["include_collections"] = False
    if args.no_nested:
        overrides["include_nested"] = False
    if args.log_level:
        overrides["log_level"] = args.log_level
    settings = Settings(**overrides)

    configure_logging(settings.get_log_level(), json_output=settings.log_json)
    init_metrics(settings.service_name)
    if settings.tracing_enabled:
        init_tracing(settings.service_name)

    try:
        records = load_records(args.records)
    except RecordsFileError as exc:
        logger.error("%s", exc)
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_BAD_INPUT

    engine = KeywordSearch(
        default_records=records,
        settings=settings,
        normalizer=format_text_punctuation if args.normalize_punctuation else None,
    )
    result = engine.search(args.query, case_sensitive=args.case_sensitive, max_results=args.max_results)

    if args.json_output:
        sys.stdout.write(render_json(result, records).decode("utf-8") + "\n")
    elif result:
        print(render_table(result, records))
    else:
        print("No matches.")
    return EXIT_OK if result else EXIT_NO_MATCHES


if __name__ == "__main__":
    sys.exit(main())
