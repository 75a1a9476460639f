"""Field-text extraction for arbitrary records.

Walks the schema returned by the capability layer and flattens a record into
an ordered list of labeled fragments:

    <title>          "Hello World"
    <tags[2]>        (marker)
    <tags[2]>        "alpha"
    <tags[2]>        "beta"
    <author.name>    "Ada"

Nested structures are searched exactly one level deep. Callers that need to
search deeper values feed those values back through the search entry point
themselves.
"""

from __future__ import annotations

from collections.abc import Mapping
import logging
from typing import Any

from record_search.domain.search import FieldFragment, field_label
from record_search.search.schema import (
    NestedField,
    RecordSchema,
    SchemaField,
    SchemaRegistry,
    TextField,
    TextListField,
    default_registry,
    is_text_list,
)


logger = logging.getLogger(__name__)

_MISSING = object()


def read_field(record: Any, name: str) -> Any:
    """Read a public field from a mapping or object.

    Returns None when the field is absent, private, or raises on access.
    """
    if name.startswith("_"):
        return None
    if isinstance(record, Mapping):
        return record.get(name)
    try:
        value = getattr(record, name, _MISSING)
    except Exception as exc:
        logger.debug("Skipping unreadable field %s on %s: %s", name, type(record).__name__, exc)
        return None
    return None if value is _MISSING else value


def extract_fields(
    record: Any,
    include_collections: bool = True,
    include_nested: bool = True,
    registry: SchemaRegistry | None = None,
) -> list[FieldFragment]:
    """Extract labeled text fragments from a record.

    Args:
        record: Any caller-supplied object
        include_collections: Emit list/tuple-of-string fields
        include_nested: Search structure-valued fields one level down
        registry: Schema registry (default: module-level registry)

    Returns:
        Fragments in field declaration order. Records without a describable
        schema produce an empty list.
    """
    active_registry = registry or default_registry
    schema = active_registry.describe(record)
    if schema is None:
        logger.debug("No searchable schema for %s", type(record).__name__)
        return []

    fragments: list[FieldFragment] = []
    for schema_field in schema.public_fields:
        value = read_field(record, schema_field.name)
        if isinstance(schema_field, NestedField):
            if include_nested:
                fragments.extend(
                    _extract_nested(schema_field, value, include_collections, active_registry)
                )
            continue
        fragments.extend(_extract_leaf(schema_field, schema_field.name, value, include_collections))
    return fragments


def _extract_leaf(
    schema_field: SchemaField,
    label_name: str,
    value: Any,
    include_collections: bool,
) -> list[FieldFragment]:
    if isinstance(schema_field, TextField):
        if isinstance(value, str) and value:
            return [FieldFragment(label=field_label(label_name), text=value)]
        return []

    if isinstance(schema_field, TextListField):
        if not include_collections or not is_text_list(value):
            return []
        label = field_label(label_name, len(value))
        fragments = [FieldFragment.marker(label)]
        fragments.extend(FieldFragment(label=label, text=item) for item in value)
        return fragments

    return []


def _extract_nested(
    schema_field: NestedField,
    value: Any,
    include_collections: bool,
    registry: SchemaRegistry,
) -> list[FieldFragment]:
    if value is None:
        return []

    nested_schema: RecordSchema | None = schema_field.schema or registry.describe(value)
    if nested_schema is None:
        return []

    fragments: list[FieldFragment] = []
    for inner in nested_schema.public_fields:
        # Deeper structures are never walked.
        if isinstance(inner, NestedField):
            continue
        inner_value = read_field(value, inner.name)
        fragments.extend(
            _extract_leaf(inner, f"{schema_field.name}.{inner.name}", inner_value, include_collections)
        )
    return fragments
