"""
orm_elastic Client — Elasticsearch Endpoints per Index and Type
===============================================================

Thin wrapper around the official Elasticsearch client which addresses
documents by (index, type, id), the way ORM models are routed. Elasticsearch
7.14+ has no mapping types, so every (index, type) pair is stored in an index
of its own:

    behaviour.elastic = "shop/product"  →  /shop-product/_doc/{id}

Several models may share one index name under different type names; their
documents and mappings never collide.

Example:
    client = ElasticClient(hosts=["http://localhost:9200"])
    client.index("shop", "product", "42", {"name": "Lamp"})
    client.search("shop", "product", {"query": {"match_all": {}}})
"""

from typing import Optional, List, Dict, Any
from urllib.parse import quote

from elasticsearch import Elasticsearch

from .config import ElasticSettings


JSON_HEADERS = {
    "accept": "application/json",
    "content-type": "application/json"
}


def _path(*parts: Any) -> str:
    return "/" + "/".join(quote(str(part), safe="") for part in parts)


def index_name(index: str, doc_type: str) -> str:
    """Gets the Elasticsearch index which stores one type of a logical index."""
    return f"{index}-{doc_type}".lower()


class ElasticClient:
    """
    Request/response client for the document and mapping endpoints.

    Example:
        # Local Elasticsearch
        client = ElasticClient()

        # Production cluster
        client = ElasticClient(
            hosts=["https://es1:9200", "https://es2:9200"],
            api_key="your-api-key"
        )
    """

    def __init__(
        self,
        hosts: Optional[List[str]] = None,
        api_key: Optional[str] = None,
        basic_auth: Optional[tuple] = None,
        verify_certs: bool = True,
        client: Optional[Elasticsearch] = None
    ):
        """
        Connect to an Elasticsearch cluster.

        Args:
            hosts: List of ES node URLs (default: ["http://localhost:9200"])
            api_key: API key for authentication
            basic_auth: Tuple of (username, password)
            verify_certs: Verify SSL certificates
            client: Already configured Elasticsearch instance (overrides the
                connection arguments)
        """
        if client is not None:
            self._client = client
            return

        # Build connection kwargs
        conn_kwargs: Dict[str, Any] = {
            "hosts": hosts or ["http://localhost:9200"],
            "verify_certs": verify_certs
        }

        if api_key:
            conn_kwargs["api_key"] = api_key
        elif basic_auth:
            conn_kwargs["basic_auth"] = basic_auth

        self._client = Elasticsearch(**conn_kwargs)

    @classmethod
    def from_settings(cls, settings: ElasticSettings) -> "ElasticClient":
        """Create a client from ElasticSettings."""
        return cls(
            hosts=settings.hosts,
            api_key=settings.api_key,
            basic_auth=settings.basic_auth,
            verify_certs=settings.verify_certs
        )

    def _request(self, method: str, path: str, body: Optional[dict] = None) -> dict:
        if body is None:
            response = self._client.perform_request(
                method, path, headers={"accept": "application/json"}
            )
        else:
            response = self._client.perform_request(
                method, path, headers=JSON_HEADERS, body=body
            )
        return response.body

    def index(self, index: str, doc_type: str, id: str, document: dict) -> dict:
        """
        Index or replace a document.

        Args:
            index: Index name
            doc_type: Type name within the index
            id: Document id
            document: Document body

        Returns:
            Index response
        """
        return self._request("PUT", _path(index_name(index, doc_type), "_doc", id), document)

    def update(self, index: str, doc_type: str, id: str, document: dict) -> dict:
        """
        Partially update a document; the engine merges `document` into it.

        Returns:
            Update response
        """
        return self._request(
            "POST", _path(index_name(index, doc_type), "_update", id), {"doc": document}
        )

    def delete(self, index: str, doc_type: str, id: str) -> dict:
        """Delete a document by id."""
        return self._request("DELETE", _path(index_name(index, doc_type), "_doc", id))

    def search(self, index: str, doc_type: str, body: dict) -> dict:
        """
        Search the documents of one type.

        Args:
            index: Index name
            doc_type: Type name within the index
            body: Search request body (query, size, from)

        Returns:
            Raw search response with the hits
        """
        return self._request("POST", _path(index_name(index, doc_type), "_search"), body)

    def create_index(self, index: str, doc_type: str, mapping: dict) -> dict:
        """
        Create the index of one type with its mapping.

        Raises:
            elasticsearch.BadRequestError: When the index already exists
        """
        return self._request(
            "PUT", _path(index_name(index, doc_type)), {"mappings": mapping}
        )

    def put_mapping(self, index: str, doc_type: str, mapping: dict) -> dict:
        """Extend the mapping of an existing type index with new fields."""
        return self._request(
            "PUT", _path(index_name(index, doc_type), "_mapping"), mapping
        )

    def close(self):
        """Close the Elasticsearch client connection."""
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
