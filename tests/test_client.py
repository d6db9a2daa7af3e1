"""Tests for ElasticClient."""
from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from orm_elastic.client import JSON_HEADERS, ElasticClient
from orm_elastic.config import ElasticSettings


class TestElasticClient:
    """Tests for the typed endpoints of ElasticClient."""

    @pytest.fixture
    def es(self):
        es = MagicMock()
        es.perform_request.return_value = MagicMock(body={"acknowledged": True})
        return es

    @pytest.fixture
    def client(self, es):
        return ElasticClient(client=es)

    def test_index(self, client, es):
        result = client.index("shop", "product", "7-en", {"name": "Lamp"})

        assert result == {"acknowledged": True}
        es.perform_request.assert_called_once_with(
            "PUT", "/shop-product/_doc/7-en", headers=JSON_HEADERS, body={"name": "Lamp"}
        )

    def test_update_wraps_document(self, client, es):
        client.update("shop", "product", "7", {"name": "Lamp"})

        es.perform_request.assert_called_once_with(
            "POST", "/shop-product/_update/7", headers=JSON_HEADERS, body={"doc": {"name": "Lamp"}}
        )

    def test_delete(self, client, es):
        client.delete("shop", "product", "7")

        es.perform_request.assert_called_once_with(
            "DELETE", "/shop-product/_doc/7", headers={"accept": "application/json"}
        )

    def test_search(self, client, es):
        client.search("shop", "product", {"size": 1})

        es.perform_request.assert_called_once_with(
            "POST", "/shop-product/_search", headers=JSON_HEADERS, body={"size": 1}
        )

    def test_create_index(self, client, es):
        client.create_index("shop", "product", {"properties": {}})

        es.perform_request.assert_called_once_with(
            "PUT", "/shop-product", headers=JSON_HEADERS, body={"mappings": {"properties": {}}}
        )

    def test_put_mapping(self, client, es):
        client.put_mapping("shop", "product", {"properties": {}})

        es.perform_request.assert_called_once_with(
            "PUT", "/shop-product/_mapping", headers=JSON_HEADERS, body={"properties": {}}
        )

    def test_path_segments_are_quoted(self, client, es):
        client.delete("shop", "product", "a/b c")

        assert es.perform_request.call_args.args[1] == "/shop-product/_doc/a%2Fb%20c"

    def test_types_sharing_an_index_are_stored_apart(self, client, es):
        client.index("Shop", "Product", "7", {})
        client.index("Shop", "Brand", "7", {})

        paths = [call.args[1] for call in es.perform_request.call_args_list]
        assert paths == ["/shop-product/_doc/7", "/shop-brand/_doc/7"]

    def test_context_manager_closes(self, es):
        with ElasticClient(client=es):
            pass

        es.close.assert_called_once()


class TestConnection:
    """Tests for building the Elasticsearch connection."""

    def test_defaults(self):
        with patch("orm_elastic.client.Elasticsearch") as es_class:
            ElasticClient()

        es_class.assert_called_once_with(hosts=["http://localhost:9200"], verify_certs=True)

    def test_api_key_takes_precedence(self):
        with patch("orm_elastic.client.Elasticsearch") as es_class:
            ElasticClient(hosts=["https://es1:9200"], api_key="key", basic_auth=("user", "pass"))

        es_class.assert_called_once_with(hosts=["https://es1:9200"], verify_certs=True, api_key="key")

    def test_from_settings(self):
        settings = ElasticSettings(
            hosts=["https://es1:9200"], username="elastic", password="secret", verify_certs=False
        )

        with patch("orm_elastic.client.Elasticsearch") as es_class:
            ElasticClient.from_settings(settings)

        es_class.assert_called_once_with(
            hosts=["https://es1:9200"], verify_certs=False, basic_auth=("elastic", "secret")
        )
