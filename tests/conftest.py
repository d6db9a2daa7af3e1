"""Pytest configuration and fixtures for orm_elastic tests."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any
from unittest.mock import MagicMock

import pytest

from orm_elastic.client import ElasticClient
from orm_elastic.orm import CollectionField, PropertyField, RelationField


@dataclass
class FakeEntry:
    """Entry with a fixed index document."""

    id: Any
    locale: str | None = None
    document: dict = field(default_factory=dict)

    def to_index_document(self) -> dict:
        return dict(self.document)


class FakeQuery:
    """Model query over an in-memory list, recording what was asked."""

    def __init__(self, entries: list, locale: str | None = None):
        self.entries = entries
        self.locale = locale
        self.order_by: list[str] = []
        self.limit: tuple[int, int] | None = None
        self.conditions: list[tuple] = []

    def add_order_by(self, expression: str) -> None:
        self.order_by.append(expression)

    def set_limit(self, limit: int, offset: int = 0) -> None:
        self.limit = (limit, offset)

    def add_condition(self, condition: str, *arguments: Any) -> None:
        self.conditions.append((condition, *arguments))

    def query(self) -> list:
        entries = sorted(self.entries, key=lambda entry: entry.id)
        if self.limit is None:
            return entries

        limit, offset = self.limit
        return entries[offset:offset + limit]


class FakeModel:
    def __init__(
        self,
        name: str,
        fields: dict | None = None,
        options: dict | None = None,
        is_localized: bool = False,
        entries: dict | None = None,
    ):
        self.name = name
        self.fields = fields or {}
        self.options = options or {}
        self.is_localized = is_localized
        # Entries by locale
        self.entries = entries or {}
        self.queries: list[FakeQuery] = []

    def get_option(self, key: str, default: Any = None) -> Any:
        return self.options.get(key, default)

    def create_query(self, locale: str | None = None) -> FakeQuery:
        query = FakeQuery(self.entries.get(locale, []), locale)
        self.queries.append(query)
        return query


class FakeOrm:
    def __init__(self, models: list, locales: list | None = None, default_locale: str = "en"):
        self.models = {model.name: model for model in models}
        self.locales = locales or ["en"]
        self.default_locale = default_locale

    def get_models(self) -> list:
        return list(self.models.values())

    def get_model(self, name: str):
        return self.models[name]


@pytest.fixture
def mock_client() -> MagicMock:
    """Create a mock ElasticClient."""
    client = MagicMock(spec=ElasticClient)
    client.index.return_value = {"result": "created"}
    client.update.return_value = {"result": "updated"}
    client.delete.return_value = {"result": "deleted"}
    client.search.return_value = {"hits": {"hits": []}}
    return client


@pytest.fixture
def category_model() -> FakeModel:
    return FakeModel(
        "Category",
        fields={
            "id": PropertyField("id", "pk"),
            "name": PropertyField("name", "string"),
            "secret": PropertyField("secret", "string", {"elastic.omit": True}),
            "icon": PropertyField("icon", "image"),
            "parent": RelationField("parent", "Category"),
        },
    )


@pytest.fixture
def product_model() -> FakeModel:
    return FakeModel(
        "Product",
        fields={
            "id": PropertyField("id", "pk"),
            "name": PropertyField("name", "string"),
            "description": PropertyField("description", "wysiwyg"),
            "price": PropertyField("price", "float"),
            "isActive": PropertyField("isActive", "boolean"),
            "released": PropertyField("released", "date"),
            "password": PropertyField("password", "password"),
            "category": RelationField("category", "Category"),
            "tags": CollectionField("tags", "Tag"),
        },
        options={"behaviour.elastic": "shop/product"},
        is_localized=True,
    )


@pytest.fixture
def orm(product_model, category_model) -> FakeOrm:
    return FakeOrm([product_model, category_model], locales=["en", "fr"])
