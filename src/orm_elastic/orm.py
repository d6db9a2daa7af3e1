"""
orm_elastic ORM Surface — What the Data Layer Must Provide
==========================================================

The data-access layer is an external collaborator. This module fixes the
surface orm_elastic relies on:

    OrmManager  →  Model  →  ModelQuery  →  Entry

Field definitions are a closed sum type: every field of a model is exactly one
of PropertyField, RelationField (to-one) or CollectionField (to-many).
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence, Union


@dataclass(frozen=True)
class PropertyField:
    """Scalar field with a primitive type tag (string, integer, pk, ...)."""

    name: str
    type: str
    options: Dict[str, Any] = field(default_factory=dict)

    def get_option(self, key: str, default: Any = None) -> Any:
        return self.options.get(key, default)


@dataclass(frozen=True)
class RelationField:
    """To-one relation (belongs-to / has-one) to another model."""

    name: str
    model: str
    options: Dict[str, Any] = field(default_factory=dict)

    def get_option(self, key: str, default: Any = None) -> Any:
        return self.options.get(key, default)


@dataclass(frozen=True)
class CollectionField:
    """To-many relation (has-many) to another model."""

    name: str
    model: str
    options: Dict[str, Any] = field(default_factory=dict)

    def get_option(self, key: str, default: Any = None) -> Any:
        return self.options.get(key, default)


FieldDefinition = Union[PropertyField, RelationField, CollectionField]


class Entry(Protocol):
    """A record of a model. Localized entries also carry a `locale`."""

    id: Any


class ElasticEntry(Entry, Protocol):
    """An entry which knows its own Elasticsearch document."""

    def to_index_document(self) -> Dict[str, Any]:
        ...


class ModelQuery(Protocol):
    """Query on the entries of one model, in one locale."""

    def add_order_by(self, expression: str) -> None:
        ...

    def set_limit(self, limit: int, offset: int = 0) -> None:
        ...

    def add_condition(self, condition: str, *arguments: Any) -> None:
        ...

    def query(self) -> Sequence[ElasticEntry]:
        ...


class Model(Protocol):
    name: str
    is_localized: bool
    fields: Mapping[str, FieldDefinition]

    def get_option(self, key: str, default: Any = None) -> Any:
        ...

    def create_query(self, locale: Optional[str] = None) -> ModelQuery:
        ...


class OrmManager(Protocol):
    locales: List[str]
    default_locale: str

    def get_models(self) -> Sequence[Model]:
        ...

    def get_model(self, name: str) -> Model:
        ...


def get_properties(model: Model) -> Dict[str, PropertyField]:
    """Gets the scalar property fields of a model, in definition order."""
    return {
        name: definition
        for name, definition in model.fields.items()
        if isinstance(definition, PropertyField)
    }
