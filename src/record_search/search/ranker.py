"""Sort and truncate per-record accumulators into a SearchResult."""

from __future__ import annotations

from collections.abc import Iterable

from record_search.domain.search import Accumulator, SearchResult


DEFAULT_MAX_RESULTS = 50


def rank(accumulators: Iterable[Accumulator], max_results: int = DEFAULT_MAX_RESULTS) -> SearchResult:
    """Rank accumulators by score, highest first.

    Zero-score accumulators are dropped. The sort is stable, so tied records
    keep discovery order; callers should not rely on tie order.
    """
    if max_results <= 0:
        return SearchResult.empty()

    scored = [acc for acc in accumulators if acc.score > 0]
    ordered = sorted(scored, key=lambda acc: acc.score, reverse=True)[:max_results]
    return SearchResult(
        records=[acc.record for acc in ordered],
        provenance=[list(acc.provenance) for acc in ordered],
        scores=[acc.score for acc in ordered],
    )
