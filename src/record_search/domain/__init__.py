"""Domain layer - value objects for record search with no infrastructure dependencies.

Key principles:
1. No dependencies on infrastructure
2. Type safety with Pydantic
3. Immutability where appropriate (value objects)
"""

from record_search.domain.search import (
    Accumulator,
    FieldFragment,
    ProvenanceEntry,
    RankedMatch,
    SearchResult,
    field_label,
    is_marker_label,
)


__all__ = [
    "Accumulator",
    "FieldFragment",
    "ProvenanceEntry",
    "RankedMatch",
    "SearchResult",
    "field_label",
    "is_marker_label",
]
