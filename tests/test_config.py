"""Tests for configuration."""
from __future__ import annotations

import pytest
from pydantic import ValidationError

from orm_elastic.config import ElasticSettings, get_settings


class TestElasticSettings:
    """Tests for ElasticSettings."""

    def test_defaults(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)

        settings = ElasticSettings()

        assert settings.hosts == ["http://localhost:9200"]
        assert settings.api_key is None
        assert settings.basic_auth is None
        assert settings.page_size == 1000
        assert settings.search_limit == 50

    def test_environment(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("ORM_ELASTIC_HOSTS", '["https://es1:9200", "https://es2:9200"]')
        monkeypatch.setenv("ORM_ELASTIC_USERNAME", "elastic")
        monkeypatch.setenv("ORM_ELASTIC_PAGE_SIZE", "250")

        settings = ElasticSettings()

        assert settings.hosts == ["https://es1:9200", "https://es2:9200"]
        assert settings.basic_auth == ("elastic", "")
        assert settings.page_size == 250

    def test_invalid_page_size(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)

        with pytest.raises(ValidationError):
            ElasticSettings(page_size=0)

    def test_get_settings_is_cached(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)

        first = get_settings(clear_cache=True)

        assert get_settings() is first
        assert get_settings(clear_cache=True) is not first
