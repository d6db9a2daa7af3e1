"""Event listener to update the ORM entries in Elasticsearch."""
import logging
from concurrent.futures import Executor, Future
from typing import Optional

from .indexer import ElasticIndexer
from .orm import ElasticEntry, Model

logger = logging.getLogger(__name__)

EVENT_INSERT_POST = "orm.insert.post"
EVENT_UPDATE_POST = "orm.update.post"
EVENT_DELETE_POST = "orm.delete.post"

EVENTS = (EVENT_INSERT_POST, EVENT_UPDATE_POST, EVENT_DELETE_POST)


class ElasticEventListener:
    """
    Forwards the post-write events of the ORM to the indexer.

    With an executor, the index requests run in the background so the write
    which triggered them does not wait on Elasticsearch.
    """

    def __init__(self, indexer: ElasticIndexer, executor: Optional[Executor] = None):
        self.indexer = indexer
        self.executor = executor

    def handle_orm_action(self, event_name: str, model: Model, entry: ElasticEntry):
        """
        Handles an ORM action to update the elastic documents.

        Returns:
            The indexer result, a Future of it with an executor, or None for
            events which are not handled
        """
        if event_name == EVENT_INSERT_POST:
            action = self.indexer.index_entry
        elif event_name == EVENT_UPDATE_POST:
            action = self.indexer.update_entry
        elif event_name == EVENT_DELETE_POST:
            action = self.indexer.delete_entry
        else:
            return None

        if self.executor is None:
            return action(model, entry)

        future = self.executor.submit(action, model, entry)
        future.add_done_callback(_log_failure)

        return future


def _log_failure(future: Future) -> None:
    if future.cancelled():
        return

    exception = future.exception()
    if exception is not None:
        logger.error("Background elastic sync failed: %s", exception)
