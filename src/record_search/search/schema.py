"""
Record schemas describing which fields of a record carry searchable text.

Defines the capability layer the field extractor walks, modeled on a search
schema module. A record type exposes its text-bearing fields in one of three
ways, checked in order:

- an explicit registration in a SchemaRegistry
- a ``__search_schema__`` class attribute holding a RecordSchema
- a declarative shape the schema can be read from: mappings, dataclasses
  and pydantic models

Field kinds:
- TextField: a single string value
- TextListField: an ordered list/tuple of strings
- NestedField: a structure whose own text fields are searched one level down
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
import dataclasses
from dataclasses import dataclass
from enum import Enum
from typing import Any, TypeVar

from pydantic import BaseModel


T = TypeVar("T", bound=type)


class FieldType(str, Enum):
    """Types of fields supported in a record schema."""

    TEXT = "text"
    TEXT_LIST = "text_list"
    NESTED = "nested"


@dataclass(frozen=True)
class SchemaField(ABC):
    """Base class for all schema fields."""

    name: str

    @property
    @abstractmethod
    def field_type(self) -> FieldType:
        """Return the field type."""

    @property
    def is_public(self) -> bool:
        return not self.name.startswith("_")

    def to_dict(self) -> dict[str, Any]:
        """Serialize field definition to dict."""
        return {"name": self.name, "type": self.field_type.value}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SchemaField:
        """Deserialize field definition from dict."""
        field_type = FieldType(data["type"])
        if field_type == FieldType.TEXT:
            return TextField(data["name"])
        if field_type == FieldType.TEXT_LIST:
            return TextListField(data["name"])
        if field_type == FieldType.NESTED:
            nested = data.get("schema")
            return NestedField(data["name"], schema=RecordSchema.from_dict(nested) if nested else None)
        msg = f"Unknown field type: {field_type}"
        raise ValueError(msg)


@dataclass(frozen=True)
class TextField(SchemaField):
    """Single string field (e.g. ``title``, ``description``)."""

    @property
    def field_type(self) -> FieldType:
        return FieldType.TEXT


@dataclass(frozen=True)
class TextListField(SchemaField):
    """Ordered collection of strings (e.g. ``tags``, ``aliases``)."""

    @property
    def field_type(self) -> FieldType:
        return FieldType.TEXT_LIST


@dataclass(frozen=True)
class NestedField(SchemaField):
    """
    Structure-valued field searched exactly one level down.

    Args:
        name: Field name on the outer record
        schema: Schema of the nested value. When None, the nested value is
            described the same way a top-level record would be.
    """

    schema: RecordSchema | None = None

    @property
    def field_type(self) -> FieldType:
        return FieldType.NESTED

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        if self.schema is not None:
            data["schema"] = self.schema.to_dict()
        return data


@dataclass
class RecordSchema:
    """
    Ordered set of searchable fields for one record type.

    Example:
        schema = RecordSchema(
            fields=[
                TextField("title"),
                TextListField("tags"),
                NestedField("author"),
            ],
            name="article",
        )
    """

    fields: list[SchemaField]
    name: str = "record"

    def __post_init__(self) -> None:
        self._field_map: dict[str, SchemaField] = {}
        for schema_field in self.fields:
            if schema_field.name in self._field_map:
                msg = f"Duplicate field '{schema_field.name}' in schema '{self.name}'"
                raise ValueError(msg)
            self._field_map[schema_field.name] = schema_field

    def __getitem__(self, name: str) -> SchemaField:
        return self._field_map[name]

    def __contains__(self, name: str) -> bool:
        return name in self._field_map

    def __iter__(self):
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)

    @property
    def public_fields(self) -> list[SchemaField]:
        return [f for f in self.fields if f.is_public]

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "fields": [f.to_dict() for f in self.fields]}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RecordSchema:
        return cls(
            fields=[SchemaField.from_dict(f) for f in data["fields"]],
            name=data.get("name", "record"),
        )


class SchemaRegistry:
    """Maps record types to their schemas.

    Lookups walk the record type's MRO so a schema registered for a base
    class also describes its subclasses.
    """

    def __init__(self) -> None:
        self._schemas: dict[type, RecordSchema] = {}

    def register(self, record_type: type, schema: RecordSchema) -> None:
        self._schemas[record_type] = schema

    def unregister(self, record_type: type) -> None:
        self._schemas.pop(record_type, None)

    def lookup(self, record_type: type) -> RecordSchema | None:
        for klass in record_type.__mro__:
            schema = self._schemas.get(klass)
            if schema is not None:
                return schema
        return None

    def __contains__(self, record_type: type) -> bool:
        return self.lookup(record_type) is not None

    def describe(self, record: Any) -> RecordSchema | None:
        """Return the schema for a record, or None when it has no describable fields."""
        if record is None or isinstance(record, (str, bytes, bytearray)):
            return None

        schema = self.lookup(type(record))
        if schema is not None:
            return schema

        declared = getattr(type(record), "__search_schema__", None)
        if isinstance(declared, RecordSchema):
            return declared

        if is_named_tuple(record):
            return _schema_from_values(type(record).__name__, zip(record._fields, record), self)
        if isinstance(record, Mapping):
            return _schema_from_values(
                type(record).__name__,
                ((key, value) for key, value in record.items() if isinstance(key, str)),
                self,
            )
        if isinstance(record, BaseModel):
            return _schema_from_values(
                type(record).__name__,
                ((name, getattr(record, name, None)) for name in type(record).model_fields),
                self,
            )
        if dataclasses.is_dataclass(record) and not isinstance(record, type):
            return _schema_from_values(
                type(record).__name__,
                ((f.name, getattr(record, f.name, None)) for f in dataclasses.fields(record)),
                self,
            )
        return None

    def is_structure(self, value: Any) -> bool:
        """True when value can be searched as a nested structure."""
        if is_named_tuple(value):
            return True
        if value is None or isinstance(value, (str, bytes, bytearray, list, tuple)):
            return False
        if self.lookup(type(value)) is not None:
            return True
        if isinstance(getattr(type(value), "__search_schema__", None), RecordSchema):
            return True
        if isinstance(value, (Mapping, BaseModel)):
            return True
        return dataclasses.is_dataclass(value) and not isinstance(value, type)


def is_named_tuple(value: Any) -> bool:
    """True for NamedTuple and namedtuple instances."""
    return isinstance(value, tuple) and isinstance(getattr(type(value), "_fields", None), tuple)


def is_text_list(value: Any) -> bool:
    """True for a list or tuple of strings. Named tuples are structures, not collections."""
    return (
        isinstance(value, (list, tuple))
        and not is_named_tuple(value)
        and all(isinstance(item, str) for item in value)
    )


def _schema_from_values(name: str, items, registry: SchemaRegistry) -> RecordSchema:
    fields: list[SchemaField] = []
    for field_name, value in items:
        if field_name.startswith("_"):
            continue
        if isinstance(value, str):
            fields.append(TextField(field_name))
        elif is_text_list(value):
            fields.append(TextListField(field_name))
        elif registry.is_structure(value):
            fields.append(NestedField(field_name))
    return RecordSchema(fields=fields, name=name)


default_registry = SchemaRegistry()


def register_schema(record_type: type, schema: RecordSchema, registry: SchemaRegistry | None = None) -> None:
    """Register a schema for a record type in the default (or given) registry."""
    (registry or default_registry).register(record_type, schema)


def searchable(*fields: SchemaField, registry: SchemaRegistry | None = None) -> Callable[[T], T]:
    """Class decorator registering the given fields as the class's schema.

    Example:
        @searchable(TextField("name"), TextListField("aliases"))
        class Planet:
            ...
    """

    def decorator(cls: T) -> T:
        register_schema(cls, RecordSchema(fields=list(fields), name=cls.__name__), registry)
        return cls

    return decorator
