"""One-shot keyword search over in-memory records.

No index is built: every call extracts fragments from each record, scores
them against the query and ranks the records that matched.

Example:
    records = [
        {"title": "Hello World", "tags": ["alpha", "beta"]},
        {"title": "Goodbye", "tags": ["gamma"]},
    ]
    result = search_records("hello", records)
    result.records     # [records[0]]
    result.provenance  # [[("<title>", "Hello World")]]
    result.scores      # [1.0]
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
import logging
from typing import Any

from record_search.config import Settings
from record_search.domain.search import Accumulator, FieldFragment, SearchResult
from record_search.observability.metrics import RECORDS_SCANNED, SEARCH_COUNT, SEARCH_LATENCY, track_latency
from record_search.observability.tracing import maybe_span
from record_search.search.extractor import extract_fields
from record_search.search.ranker import DEFAULT_MAX_RESULTS, rank
from record_search.search.schema import SchemaRegistry
from record_search.search.scorer import KeywordQuery, Normalizer, score_fragments


logger = logging.getLogger(__name__)


class InvalidArgumentError(ValueError):
    """Raised when a search call is missing its query or its records."""


def search_records(
    query: str,
    records: Iterable[Any],
    *,
    case_sensitive: bool = False,
    max_results: int = DEFAULT_MAX_RESULTS,
    include_collections: bool = True,
    include_nested: bool = True,
    normalizer: Normalizer | None = None,
    registry: SchemaRegistry | None = None,
) -> SearchResult:
    """Rank records against a free-text query.

    Args:
        query: Search text; whitespace separates keywords
        records: Records of any (mixed) types
        case_sensitive: Match without case folding
        max_results: Maximum number of records returned
        include_collections: Search list/tuple-of-string fields
        include_nested: Search structure fields one level down
        normalizer: Optional transform applied to field text before matching
        registry: Schema registry used to describe records

    Returns:
        SearchResult with records, provenance and scores, best match first

    Raises:
        InvalidArgumentError: query is not a string or records is None
    """
    if not isinstance(query, str):
        msg = f"query must be a string, got {type(query).__name__}"
        raise InvalidArgumentError(msg)
    if records is None:
        msg = "records must be provided when no default records are configured"
        raise InvalidArgumentError(msg)

    parsed = KeywordQuery.parse(query, case_sensitive=case_sensitive)
    if parsed.is_blank or max_results <= 0:
        logger.debug("Skipping search (blank=%s, max_results=%d)", parsed.is_blank, max_results)
        SEARCH_COUNT.labels(outcome="skipped").inc()
        return SearchResult.empty()

    with track_latency(SEARCH_LATENCY, outcome="ranked"):
        accumulators: dict[int, Accumulator] = {}
        scanned = 0
        for record in records:
            scanned += 1
            fragments = extract_fields(
                record,
                include_collections=include_collections,
                include_nested=include_nested,
                registry=registry,
            )
            if not fragments:
                continue
            accumulator = accumulators.get(id(record)) or Accumulator(record=record)
            if score_fragments(parsed, fragments, accumulator, normalizer=normalizer) > 0:
                accumulators[id(record)] = accumulator

        result = rank(accumulators.values(), max_results=max_results)

    RECORDS_SCANNED.labels(matched="true").inc(len(accumulators))
    RECORDS_SCANNED.labels(matched="false").inc(scanned - len(accumulators))
    SEARCH_COUNT.labels(outcome="ranked").inc()
    logger.debug(
        "Ranked %d of %d records for %d keyword(s)",
        len(result),
        scanned,
        len(parsed.keywords),
        extra={"matched": len(accumulators), "returned": len(result)},
    )
    return result


class KeywordSearch:
    """Search facade carrying caller-owned defaults.

    ``default_records`` is used when a call passes no records. The list is
    read, never copied or mutated; callers must not mutate it while a
    search call is running.
    """

    def __init__(
        self,
        default_records: Sequence[Any] | None = None,
        settings: Settings | None = None,
        registry: SchemaRegistry | None = None,
        normalizer: Normalizer | None = None,
    ) -> None:
        self.default_records = default_records
        self.settings = settings or Settings()
        self.registry = registry
        self.normalizer = normalizer

    def search(
        self,
        query: str,
        records: Iterable[Any] | None = None,
        *,
        case_sensitive: bool | None = None,
        max_results: int | None = None,
    ) -> SearchResult:
        """Search the given records, or the default records when none are given."""
        target = records if records is not None else self.default_records
        if target is None:
            msg = "records must be provided when no default records are configured"
            raise InvalidArgumentError(msg)

        settings = self.settings
        with maybe_span(
            settings.tracing_enabled,
            "record_search.search",
            attributes={"search.keyword_count": len(query.split()) if isinstance(query, str) else 0},
        ):
            return search_records(
                query,
                target,
                case_sensitive=settings.case_sensitive if case_sensitive is None else case_sensitive,
                max_results=settings.max_results if max_results is None else max_results,
                include_collections=settings.include_collections,
                include_nested=settings.include_nested,
                normalizer=self.normalizer,
                registry=self.registry,
            )

    def extract_fields(
        self,
        record: Any,
        include_collections: bool | None = None,
        include_nested: bool | None = None,
    ) -> list[FieldFragment]:
        """Raw labeled field text of one record, without ranking."""
        return extract_fields(
            record,
            include_collections=self.settings.include_collections
            if include_collections is None
            else include_collections,
            include_nested=self.settings.include_nested if include_nested is None else include_nested,
            registry=self.registry,
        )
