"""
orm_elastic Search — From Elasticsearch Hits to ORM Conditions
==============================================================

Searches the documents of a model with a query string and narrows an ORM
query to the primary keys of the hits:

    "lamp AND red"  →  hits 7-en, 7-fr, 9  →  {id} IN (7, 9)

A result without usable hits narrows the query to nothing; it never leaves
the query unfiltered.

Example:
    search = ElasticSearch(client)
    result = search.search_by_query_string(model, {"query": "lamp", "limit": 10})
    if result is not None:
        query = model.create_query()
        search.apply_result_to_query(result, query)
        entries = query.query()
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Union

from .client import ElasticClient
from .documents import split_document_id
from .orm import Model, ModelQuery
from .parameters import IndexParameterResolver

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 50

# Primary key which matches no entry
NO_MATCH_ID = 0


class ElasticSearch:
    """Search of entries in Elasticsearch."""

    def __init__(
        self,
        client: ElasticClient,
        resolver: Optional[IndexParameterResolver] = None,
        default_limit: int = DEFAULT_LIMIT
    ):
        self.client = client
        self.resolver = resolver or IndexParameterResolver()
        self.default_limit = default_limit

    def search_by_query_string(self, model: Model, options: Mapping[str, Any]) -> Optional[dict]:
        """
        Search for model entries with the provided options.

        Args:
            model: Model to look for
            options: Search options
                - query: query string, passed to Elasticsearch as is
                - limit: maximum number of hits (default 50)
                - offset: offset of the first hit (default 0)

        Returns:
            Raw search response, None when elastic is disabled for the model
            or no query is provided
        """
        target = self.resolver.resolve(model)
        if target is None or options.get("query") is None:
            return None

        body = {
            "query": {
                "query_string": {
                    "query": options["query"],
                    "analyze_wildcard": True
                }
            },
            "size": options.get("limit", self.default_limit),
            "from": options.get("offset", 0)
        }

        return self.client.search(target.index, target.type, body)

    def apply_result_to_query(self, result: Optional[Mapping[str, Any]], query: ModelQuery) -> None:
        """
        Restricts the provided ORM query to the entries of the search result.

        Locales are dropped from the hits; the query is narrowed on primary
        key only.
        """
        primary_keys = self.get_primary_keys(result)
        if primary_keys:
            query.add_condition("{id} IN %1%", primary_keys)
        else:
            query.add_condition("{id} = %1%", NO_MATCH_ID)

    def get_primary_keys(self, result: Optional[Mapping[str, Any]]) -> List[Union[int, str]]:
        """
        Gets the deduplicated primary keys of the hits, in hit order.

        Returns:
            The primary keys, empty when the result has no usable hits
        """
        hits = _get_hits(result)
        if hits is None:
            logger.warning("Search result has no hits, matching nothing")
            return []

        ids: Dict[Union[int, str], None] = {}
        for hit in hits:
            document_id = hit.get("_id") if isinstance(hit, Mapping) else None
            if not document_id:
                logger.warning("Skipping search hit without id: %r", hit)
                continue

            primary_key, _ = split_document_id(str(document_id))
            if not primary_key or primary_key.startswith("-"):
                logger.warning("Skipping search hit with invalid id %r", document_id)
                continue

            ids[_parse_primary_key(primary_key)] = None

        return list(ids)


def _get_hits(result: Optional[Mapping[str, Any]]) -> Optional[list]:
    if not isinstance(result, Mapping):
        return None

    outer = result.get("hits")
    if not isinstance(outer, Mapping):
        return None

    hits = outer.get("hits")
    if not isinstance(hits, list):
        return None

    return hits


def _parse_primary_key(value: str) -> Union[int, str]:
    # Only canonical decimal numbers, "007" stays a string key
    if value.isascii() and value.isdecimal() and str(int(value)) == value:
        return int(value)

    return value
