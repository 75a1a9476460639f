"""Domain models for keyword search over in-memory records.

Following Cosmic Python principles:
- Value Objects are immutable (frozen=True)
- No infrastructure dependencies

Records themselves are opaque caller-owned objects; the models here only
hold references to them for the duration of one search call.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any, NamedTuple

from pydantic import BaseModel, ConfigDict, Field, model_validator


def is_marker_label(text: str) -> bool:
    """Return True when text looks like a field marker (``<name>`` or ``<name[n]>``)."""
    return len(text) >= 2 and text.startswith("<") and text.endswith(">")


def field_label(name: str, count: int | None = None) -> str:
    """Build a field marker label, optionally carrying a collection size."""
    if count is None:
        return f"<{name}>"
    return f"<{name}[{count}]>"


class FieldFragment(BaseModel):
    """Value object for one labeled piece of extractable record text.

    Marker fragments announce a collection field (``<tags[2]>``) and carry
    no text of their own; the element fragments that follow share the
    marker's label.
    """

    model_config = ConfigDict(frozen=True)

    label: str
    text: str = ""
    is_marker: bool = False

    @classmethod
    def marker(cls, label: str) -> FieldFragment:
        return cls(label=label, text="", is_marker=True)


ProvenanceEntry = tuple[str, str]


@dataclass
class Accumulator:
    """Transient per-record score and provenance for a single search call."""

    record: Any
    provenance: list[ProvenanceEntry] = field(default_factory=list)
    score: float = 0.0

    def add(self, amount: float) -> None:
        if amount < 0:
            msg = f"Score increments must be non-negative, got {amount}"
            raise ValueError(msg)
        self.score += amount

    def record_match(self, label: str, text: str) -> None:
        self.provenance.append((label, text))

    def has_label(self, label: str) -> bool:
        return any(entry_label == label for entry_label, _ in self.provenance)


class RankedMatch(NamedTuple):
    """One row of a SearchResult."""

    record: Any
    provenance: list[ProvenanceEntry]
    score: float


class SearchResult(BaseModel):
    """Ranked records with index-aligned provenance and scores.

    ``records[i]`` matched because of ``provenance[i]`` and scored
    ``scores[i]``; scores are non-increasing by index.
    """

    model_config = ConfigDict(frozen=True)

    records: list[Any] = Field(default_factory=list)
    provenance: list[list[ProvenanceEntry]] = Field(default_factory=list)
    scores: list[float] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_alignment(self) -> SearchResult:
        if not (len(self.records) == len(self.provenance) == len(self.scores)):
            raise ValueError(
                "records, provenance and scores must have equal length "
                f"(got {len(self.records)}, {len(self.provenance)}, {len(self.scores)})"
            )
        return self

    @classmethod
    def empty(cls) -> SearchResult:
        return cls()

    def __len__(self) -> int:
        return len(self.records)

    def __bool__(self) -> bool:
        return bool(self.records)

    def matches(self) -> Iterator[RankedMatch]:
        """Iterate result rows as (record, provenance, score) tuples."""
        for record, provenance, score in zip(self.records, self.provenance, self.scores):
            yield RankedMatch(record, provenance, score)
