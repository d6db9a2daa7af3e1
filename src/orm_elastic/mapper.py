"""
orm_elastic Mapper — ORM Model Definitions to Elasticsearch Mappings
====================================================================

Translates the field definitions of the ORM models into index mappings:

    Model fields  →  type mapping  →  one Elasticsearch index per type

Field translation:
    - property     → by type tag, see PROPERTY_TYPES
    - has many     → text (each related entry as its string value)
    - belongs to   → object with the scalar properties of the related model

Relations of a related model are not expanded: nesting stops at one level.

Typical usage:
    mapper = ElasticMapper(client, orm)
    mapper.define_indices()
"""

import logging
from typing import Dict, Optional, Sequence

from elasticsearch import BadRequestError
from typing_extensions import assert_never

from .client import ElasticClient
from .documents import NON_INDEXABLE_TYPES
from .exceptions import UnmappedFieldTypeError
from .orm import (
    CollectionField, FieldDefinition, Model, OrmManager, PropertyField,
    RelationField, get_properties,
)
from .parameters import OPTION_OMIT, IndexParameterResolver

logger = logging.getLogger(__name__)


# Elasticsearch type of the indexable property type tags
PROPERTY_TYPES = {
    "boolean": "boolean",
    "date": "date",
    "datetime": "date",
    "email": "text",
    "richcontent": "text",
    "string": "text",
    "text": "text",
    "website": "text",
    "wysiwyg": "text",
    "float": "float",
    "pk": "long",
    "integer": "long",
    "time": "long",
}

# Exact value, not analyzed
LOCALE_MAPPING = {
    "type": "keyword"
}

GEO_MAPPING = {
    "type": "geo_point"
}


class ElasticMapper:
    """
    Mapper for ORM model definitions to Elasticsearch.

    The mapping is rebuilt on every call; nothing is cached except the index
    routing in the resolver.
    """

    def __init__(
        self,
        client: ElasticClient,
        orm: OrmManager,
        resolver: Optional[IndexParameterResolver] = None
    ):
        """
        Args:
            client: Elasticsearch client
            orm: ORM manager to look up the models and their relations
            resolver: Index routing resolver, shared with the indexer
        """
        self.client = client
        self.orm = orm
        self.resolver = resolver or IndexParameterResolver()

    def define_indices(self) -> Dict[str, Dict[str, dict]]:
        """
        Defines the indices for all ORM models. New indices are created,
        existing ones get their mappings extended.

        Returns:
            The definitions which were sent, by index and type name
        """
        definitions = self.build_index_definitions(self.orm.get_models())

        for index, types in definitions.items():
            for doc_type, mapping in types.items():
                try:
                    self.client.create_index(index, doc_type, mapping)
                    logger.info("Created index for %s/%s", index, doc_type)
                except BadRequestError as e:
                    logger.info(
                        "Could not create index for %s/%s (%s), updating its mapping",
                        index, doc_type, e.message
                    )
                    self.client.put_mapping(index, doc_type, mapping)

        return definitions

    def build_index_definitions(self, models: Sequence[Model]) -> Dict[str, Dict[str, dict]]:
        """
        Builds the mappings of the provided models, grouped by index.

        Raises:
            UnmappedFieldTypeError: When a field type can't be mapped
        """
        definitions: Dict[str, Dict[str, dict]] = {}

        for model in models:
            target = self.resolver.resolve(model)
            if target is None:
                continue

            definitions.setdefault(target.index, {})[target.type] = self.get_model_mapping(model)

        return definitions

    def get_model_mapping(self, model: Model) -> dict:
        """Gets the type mapping for the provided model."""
        properties = self.get_fields_mapping(model)

        if model.is_localized:
            properties["locale"] = dict(LOCALE_MAPPING)

        if "latitude" in properties and "longitude" in properties:
            properties["geo"] = dict(GEO_MAPPING)

        return {
            "_source": {
                "enabled": True
            },
            "properties": properties
        }

    def get_fields_mapping(self, model: Model) -> Dict[str, dict]:
        mapping = {}

        for name, definition in model.fields.items():
            if definition.get_option(OPTION_OMIT):
                continue

            field_mapping = self.get_field_mapping(model, definition)
            if field_mapping is None:
                continue

            mapping[name] = field_mapping

        return mapping

    def get_field_mapping(self, model: Model, definition: FieldDefinition) -> Optional[dict]:
        """
        Gets the mapping of a single field.

        Returns:
            The field mapping, or None when the field is not indexable
        """
        if isinstance(definition, PropertyField):
            return self.get_property_mapping(model, definition)
        elif isinstance(definition, CollectionField):
            return {"type": "text"}
        elif isinstance(definition, RelationField):
            return self.get_object_mapping(definition)
        else:
            assert_never(definition)

    def get_property_mapping(self, model: Model, definition: PropertyField) -> Optional[dict]:
        field_type = definition.type
        if field_type in NON_INDEXABLE_TYPES:
            return None

        try:
            return {"type": PROPERTY_TYPES[field_type]}
        except KeyError:
            raise UnmappedFieldTypeError(model.name, definition.name, field_type) from None

    def get_object_mapping(self, definition: RelationField) -> dict:
        """Gets the mapping of a to-one relation: the related scalar properties."""
        related = self.orm.get_model(definition.model)

        properties = {}
        for name, prop in get_properties(related).items():
            if prop.get_option(OPTION_OMIT):
                continue

            prop_mapping = self.get_property_mapping(related, prop)
            if prop_mapping is not None:
                properties[name] = prop_mapping

        return {
            "type": "object",
            "properties": properties
        }
