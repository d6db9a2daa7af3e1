"""
orm-elastic — Elasticsearch Synchronization for ORM Models
==========================================================

Keeps an Elasticsearch index in sync with the entries of an ORM, and turns
search hits back into conditions on ORM queries.

Model routing comes from the "behaviour.elastic" model option:

    behaviour.elastic = "shop/product"   →  index "shop", type "product"

Models without the option are not indexed.

Pipeline:
    ElasticMapper     →  index mappings from the model field definitions
    ElasticIndexer    →  index, update, delete and re-index entries
    ElasticSearch     →  query string search, hits to primary keys
    ElasticEventListener  →  ORM post-write events to the indexer

Usage:
    from orm_elastic import (
        ElasticClient, ElasticIndexer, ElasticMapper, ElasticSearch,
        IndexParameterResolver,
    )

    client = ElasticClient(hosts=["http://localhost:9200"])
    resolver = IndexParameterResolver()

    ElasticMapper(client, orm, resolver).define_indices()
    ElasticIndexer(client, orm, resolver).index_models(orm.get_models())

License: MIT
"""

__version__ = "0.1.0"

from .client import ElasticClient
from .config import ElasticSettings, get_settings
from .documents import ElasticDocumentBuilder, get_document_id, split_document_id
from .exceptions import ConfigurationError, OrmElasticError, UnmappedFieldTypeError
from .indexer import ElasticIndexer
from .listener import ElasticEventListener
from .mapper import ElasticMapper
from .orm import CollectionField, PropertyField, RelationField
from .parameters import IndexParameterResolver, IndexTarget
from .search import ElasticSearch

__all__ = [
    "ElasticClient",
    "ElasticSettings",
    "get_settings",
    "ElasticDocumentBuilder",
    "get_document_id",
    "split_document_id",
    "ConfigurationError",
    "OrmElasticError",
    "UnmappedFieldTypeError",
    "ElasticIndexer",
    "ElasticEventListener",
    "ElasticMapper",
    "CollectionField",
    "PropertyField",
    "RelationField",
    "IndexParameterResolver",
    "IndexTarget",
    "ElasticSearch",
]
