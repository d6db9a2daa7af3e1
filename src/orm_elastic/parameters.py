"""Resolution of the Elasticsearch index and type of a model."""
import logging
import threading
from dataclasses import dataclass
from typing import Dict, Optional

from .exceptions import ConfigurationError
from .orm import Model

logger = logging.getLogger(__name__)

# Model option with the "<index>/<type>" routing of its entries
OPTION_ELASTIC = "behaviour.elastic"

# Field option to leave a field out of the mapping and the document
OPTION_OMIT = "elastic.omit"


@dataclass(frozen=True)
class IndexTarget:
    """Index and type which receive the documents of a model."""

    index: str
    type: str


def parse_index_target(model_name: str, value: str) -> IndexTarget:
    """
    Parses a "<index>/<type>" routing value.

    Raises:
        ConfigurationError: When the value has no "/" separator
    """
    index, separator, doc_type = value.partition("/")
    if not separator:
        raise ConfigurationError(
            f"Could not initialize elastic behaviour of {model_name}: "
            f"expecting 'index/type' value for {OPTION_ELASTIC}, got {value!r}"
        )

    return IndexTarget(index=index, type=doc_type)


class IndexParameterResolver:
    """
    Resolves and caches the IndexTarget of models by model name.

    A model without the routing option is disabled and resolves to None. The
    cache lives as long as the resolver; share one resolver between the
    mapper, indexer and search of a pipeline.
    """

    def __init__(self):
        self._targets: Dict[str, Optional[IndexTarget]] = {}
        self._lock = threading.Lock()

    def resolve(self, model: Model) -> Optional[IndexTarget]:
        """
        Gets the index and type for the provided model.

        Returns:
            IndexTarget, or None when elastic is disabled for the model
        """
        try:
            return self._targets[model.name]
        except KeyError:
            pass

        with self._lock:
            if model.name not in self._targets:
                value = model.get_option(OPTION_ELASTIC)
                if value:
                    target = parse_index_target(model.name, value)
                    logger.debug("Model %s is indexed in %s/%s", model.name, target.index, target.type)
                else:
                    target = None
                    logger.debug("Elastic is disabled for model %s", model.name)

                self._targets[model.name] = target

            return self._targets[model.name]

    def validate(self, model: Model) -> None:
        """Fails fast on a malformed routing option, without caching it."""
        value = model.get_option(OPTION_ELASTIC)
        if value:
            parse_index_target(model.name, value)
