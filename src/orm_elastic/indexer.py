"""
orm_elastic Indexer — Keeping ORM Entries in Elasticsearch
==========================================================

Single entries are indexed, updated and deleted as the ORM writes them.
Complete models are re-indexed page by page:

    for each locale:
        SELECT ... ORDER BY id ASC LIMIT 1000 OFFSET 0
        SELECT ... ORDER BY id ASC LIMIT 1000 OFFSET 1000
        ...until a page comes back short

Each page is fetched and indexed on its own, so a failure only loses the
page in flight. Independent models can be re-indexed in parallel threads;
pages of one locale are always fetched in order.

Typical usage:
    indexer = ElasticIndexer(client, orm)
    indexer.index_models(orm.get_models(), workers=4)
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence

from .client import ElasticClient
from .documents import get_document_id
from .orm import ElasticEntry, Entry, Model, OrmManager
from .parameters import IndexParameterResolver

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 1000


class ElasticIndexer:
    """
    Indexer of ORM entries in Elasticsearch.

    Every method returns None when elastic is disabled for the model, without
    contacting the cluster. Client errors propagate to the caller.
    """

    def __init__(
        self,
        client: ElasticClient,
        orm: OrmManager,
        resolver: Optional[IndexParameterResolver] = None,
        page_size: int = DEFAULT_PAGE_SIZE
    ):
        """
        Args:
            client: Elasticsearch client
            orm: ORM manager, provides the locales
            resolver: Index routing resolver, shared with the mapper and search
            page_size: Entries per page when re-indexing a model
        """
        self.client = client
        self.orm = orm
        self.resolver = resolver or IndexParameterResolver()
        self.page_size = page_size

    def index_models(self, models: Sequence[Model], workers: int = 1) -> None:
        """
        Indexes all entries of the provided models.

        Args:
            models: Models to re-index
            workers: Threads to re-index models in parallel
        """
        if workers <= 1:
            for model in models:
                self.index_model(model)
            return

        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [executor.submit(self.index_model, model) for model in models]
            for future in futures:
                future.result()

    def index_model(self, model: Model) -> Optional[int]:
        """
        Indexes all entries of the provided model, in all its locales.

        Returns:
            Number of indexed entries, None when elastic is disabled
        """
        if self.resolver.resolve(model) is None:
            return None

        start_time = time.time()
        total_entries = 0

        for locale in self._get_locales(model):
            page = 1
            while True:
                entries = self._get_page(model, locale, page)
                for entry in entries:
                    self.index_entry(model, entry)

                total_entries += len(entries)
                logger.info(
                    "Indexed page %d of %s (%s): %d entries",
                    page, model.name, locale, len(entries)
                )

                if len(entries) < self.page_size:
                    break

                page += 1

        logger.info(
            "Indexed %d entries of %s in %.1f seconds",
            total_entries, model.name, time.time() - start_time
        )

        return total_entries

    def _get_locales(self, model: Model) -> List[str]:
        if model.is_localized:
            return list(self.orm.locales)

        return [self.orm.default_locale]

    def _get_page(self, model: Model, locale: str, page: int) -> Sequence[ElasticEntry]:
        query = model.create_query(locale)
        query.add_order_by("{id} ASC")
        query.set_limit(self.page_size, (page - 1) * self.page_size)

        return query.query()

    def index_entry(self, model: Model, entry: ElasticEntry) -> Optional[dict]:
        """
        Indexes a new entry, replacing any previous document.

        Returns:
            Index response, None when elastic is disabled
        """
        target = self.resolver.resolve(model)
        if target is None:
            return None

        document_id = get_document_id(entry)
        try:
            return self.client.index(
                target.index, target.type, document_id, entry.to_index_document()
            )
        except Exception:
            logger.exception(
                "Could not index %s entry %s (locale %s)",
                model.name, document_id, getattr(entry, "locale", None)
            )
            raise

    def update_entry(self, model: Model, entry: ElasticEntry) -> Optional[dict]:
        """
        Updates an entry in the index; the document is merged by Elasticsearch.

        Returns:
            Update response, None when elastic is disabled
        """
        target = self.resolver.resolve(model)
        if target is None:
            return None

        document_id = get_document_id(entry)
        try:
            return self.client.update(
                target.index, target.type, document_id, entry.to_index_document()
            )
        except Exception:
            logger.exception(
                "Could not update %s entry %s (locale %s)",
                model.name, document_id, getattr(entry, "locale", None)
            )
            raise

    def delete_entry(self, model: Model, entry: Entry) -> Optional[dict]:
        """
        Deletes an entry from the index.

        Returns:
            Delete response, None when elastic is disabled
        """
        target = self.resolver.resolve(model)
        if target is None:
            return None

        document_id = get_document_id(entry)
        try:
            return self.client.delete(target.index, target.type, document_id)
        except Exception:
            logger.exception(
                "Could not delete %s entry %s (locale %s)",
                model.name, document_id, getattr(entry, "locale", None)
            )
            raise
