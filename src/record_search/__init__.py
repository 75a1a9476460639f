"""Ad-hoc keyword search and relevance ranking over in-memory records."""

from record_search.domain.search import FieldFragment, RankedMatch, SearchResult
from record_search.search.engine import InvalidArgumentError, KeywordSearch, search_records
from record_search.search.extractor import extract_fields
from record_search.search.schema import (
    NestedField,
    RecordSchema,
    SchemaRegistry,
    TextField,
    TextListField,
    register_schema,
    searchable,
)


__all__ = [
    "FieldFragment",
    "InvalidArgumentError",
    "KeywordSearch",
    "NestedField",
    "RankedMatch",
    "RecordSchema",
    "SchemaRegistry",
    "SearchResult",
    "TextField",
    "TextListField",
    "extract_fields",
    "register_schema",
    "search_records",
    "searchable",
]
