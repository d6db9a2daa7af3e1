"""
orm_elastic Documents — Identity and Content of Indexed Entries
===============================================================

Document id:

    non-localized entry   →  "<pk>"          e.g. "7"
    localized entry       →  "<pk>-<locale>"  e.g. "7-en"

The separator is not escaped: a primary key which itself contains "-" can
not be told apart from a localized id. Integer primary keys are safe.

Document content is produced by the entry itself (`to_index_document()`).
ElasticDocumentBuilder implements that method by reflection on the entry's
attributes, following the same field rules as the mapper.
"""

from typing import Any, Dict, Optional, Tuple

from typing_extensions import assert_never

from .exceptions import UnmappedFieldTypeError
from .orm import (
    CollectionField, Entry, FieldDefinition, Model, OrmManager, PropertyField,
    RelationField, get_properties,
)
from .parameters import OPTION_OMIT, IndexParameterResolver

LOCALE_SEPARATOR = "-"

# Property types which are never sent to the index
NON_INDEXABLE_TYPES = frozenset(["binary", "file", "image", "password", "serialize", "serialized"])

SCALAR_TYPES = frozenset([
    "date", "datetime",
    "email", "richcontent", "string", "text", "website", "wysiwyg",
    "float", "integer", "time",
])


def get_document_id(entry: Entry) -> str:
    """Gets the document id for the provided entry."""
    document_id = str(entry.id)

    locale = getattr(entry, "locale", None)
    if locale:
        document_id += LOCALE_SEPARATOR + locale

    return document_id


def split_document_id(document_id: str) -> Tuple[str, Optional[str]]:
    """
    Splits a document id in primary key and locale.

    An id without separator, or with the separator in first position, has no
    locale.
    """
    if document_id.find(LOCALE_SEPARATOR) > 0:
        primary_key, locale = document_id.split(LOCALE_SEPARATOR, 1)
        return primary_key, locale

    return document_id, None


class ElasticDocumentBuilder:
    """
    Builds the Elasticsearch document of an entry from its attributes.

    Example:
        builder = ElasticDocumentBuilder(orm)

        class ProductEntry:
            def to_index_document(self):
                return builder.build(self.model, self)
    """

    def __init__(self, orm: OrmManager, resolver: Optional[IndexParameterResolver] = None):
        self.orm = orm
        self.resolver = resolver or IndexParameterResolver()

    def build(self, model: Model, entry: Entry) -> Dict[str, Any]:
        """
        Raises:
            ConfigurationError: When the routing option of the model is malformed
            UnmappedFieldTypeError: When a field type can't be indexed
        """
        self.resolver.validate(model)

        document: Dict[str, Any] = {}

        for name, definition in model.fields.items():
            if definition.get_option(OPTION_OMIT):
                continue

            self._add_field(model, definition, entry, document)

        if model.is_localized:
            document["locale"] = getattr(entry, "locale", None)

        if "latitude" in model.fields and "longitude" in model.fields:
            latitude = getattr(entry, "latitude", None)
            longitude = getattr(entry, "longitude", None)
            if latitude and longitude:
                document["geo"] = {"lat": latitude, "lon": longitude}
            else:
                document["geo"] = None

        return document

    def _add_field(self, model: Model, definition: FieldDefinition, entry: Entry, document: dict) -> None:
        if isinstance(definition, PropertyField):
            self._add_property(model.name, definition, entry, document)
        elif isinstance(definition, CollectionField):
            related = getattr(entry, definition.name, None) or []
            document[definition.name] = [str(item) for item in related]
        elif isinstance(definition, RelationField):
            document[definition.name] = self._get_object(definition, entry)
        else:
            assert_never(definition)

    def _add_property(self, model_name: str, definition: PropertyField, entry: Any, document: dict) -> None:
        field_type = definition.type
        if field_type in NON_INDEXABLE_TYPES or field_type == "pk":
            return

        if field_type == "boolean":
            document[definition.name] = bool(getattr(entry, definition.name, False))
        elif field_type in SCALAR_TYPES:
            document[definition.name] = getattr(entry, definition.name, None)
        else:
            raise UnmappedFieldTypeError(model_name, definition.name, field_type)

    def _get_object(self, definition: RelationField, entry: Entry) -> Optional[Dict[str, Any]]:
        related = getattr(entry, definition.name, None)
        if related is None:
            return None

        model = self.orm.get_model(definition.model)

        values: Dict[str, Any] = {}
        for name, prop in get_properties(model).items():
            if prop.get_option(OPTION_OMIT):
                continue

            self._add_property(model.name, prop, related, values)

        return values
