"""Weighted multi-keyword scoring of labeled fragments.

Two rules contribute to a record's score for every fragment scanned:

- Whole query: the fragment contains the full normalized query. Adds 1.0
  and always records provenance, so a record matching in many fragments
  scores above 1.0.
- Keywords (multi-word queries only): every (token, keyword) pair where the
  token contains the keyword adds 1/K. The same keyword inside several
  tokens counts each time. Provenance is recorded only for a label the
  record has not been credited with yet.

The asymmetric provenance deduplication between the two rules is deliberate.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass

from record_search.domain.search import Accumulator, FieldFragment, is_marker_label


WHOLE_QUERY_WEIGHT = 1.0

Normalizer = Callable[[str], str]


@dataclass(frozen=True)
class KeywordQuery:
    """A query normalized for matching, split into whitespace keywords."""

    text: str
    keywords: tuple[str, ...]
    case_sensitive: bool = False

    @classmethod
    def parse(cls, query: str, case_sensitive: bool = False) -> KeywordQuery:
        text = query if case_sensitive else query.casefold()
        return cls(text=text, keywords=tuple(text.split()), case_sensitive=case_sensitive)

    @property
    def is_blank(self) -> bool:
        return not self.keywords

    @property
    def keyword_weight(self) -> float:
        return 1.0 / len(self.keywords) if self.keywords else 0.0

    @property
    def is_multi_keyword(self) -> bool:
        return len(self.keywords) > 1

    def normalize(self, text: str) -> str:
        return text if self.case_sensitive else text.casefold()


def count_keyword_hits(tokens: Iterable[str], keywords: Iterable[str]) -> int:
    """Count (token, keyword) pairs where the keyword is a substring of the token."""
    keyword_list = list(keywords)
    return sum(1 for token in tokens for keyword in keyword_list if keyword in token)


def score_fragments(
    query: KeywordQuery,
    fragments: Iterable[FieldFragment],
    accumulator: Accumulator,
    normalizer: Normalizer | None = None,
) -> float:
    """Score one record's fragments into its accumulator.

    Args:
        query: Parsed query
        fragments: Fragments of a single record, in extraction order
        accumulator: The record's accumulator, updated in place
        normalizer: Optional text transform applied before matching

    Returns:
        The score added by this call.
    """
    if query.is_blank:
        return 0.0

    start = accumulator.score
    weight = query.keyword_weight
    current_label = ""

    for fragment in fragments:
        if fragment.is_marker:
            current_label = fragment.label
            continue
        if is_marker_label(fragment.label):
            current_label = fragment.label

        source = normalizer(fragment.text) if normalizer else fragment.text
        contents = query.normalize(source)

        if query.text in contents:
            accumulator.add(WHOLE_QUERY_WEIGHT)
            accumulator.record_match(current_label, fragment.text)

        if query.is_multi_keyword:
            hits = count_keyword_hits(contents.split(), query.keywords)
            if hits:
                if not accumulator.has_label(current_label):
                    accumulator.record_match(current_label, fragment.text)
                accumulator.add(hits * weight)

    return accumulator.score - start
