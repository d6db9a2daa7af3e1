"""
orm_elastic CLI — Command-Line Interface
========================================

Command-line interface for synchronizing ORM models with Elasticsearch.

The ORM is loaded from --registry, a "module:callable" path to a function
returning the ORM manager.

Usage:
    orm-elastic --registry myapp.orm:get_orm mapping
    orm-elastic --registry myapp.orm:get_orm define
    orm-elastic --registry myapp.orm:get_orm reindex Product Category --workers 2
    orm-elastic --registry myapp.orm:get_orm search Product "lamp AND red"
"""

import argparse
import importlib
import json
import logging
import sys
from typing import List, Optional

from .client import ElasticClient
from .config import ElasticSettings, get_settings
from .exceptions import ConfigurationError
from .orm import OrmManager
from .parameters import IndexParameterResolver


def get_hosts(args, settings: ElasticSettings) -> List[str]:
    """Extract hosts from args, falling back to the settings."""
    if args.hosts:
        return args.hosts.split(",")
    return settings.hosts


def get_client(args) -> ElasticClient:
    settings = get_settings()

    return ElasticClient(
        hosts=get_hosts(args, settings),
        api_key=args.api_key or settings.api_key,
        basic_auth=settings.basic_auth,
        verify_certs=settings.verify_certs
    )


def load_orm(path: str) -> OrmManager:
    """
    Load the ORM manager from a "module:callable" path.

    Raises:
        ConfigurationError: When the path can't be resolved
    """
    module_name, separator, attribute = path.partition(":")
    if not separator or not attribute:
        raise ConfigurationError(f"Expecting 'module:callable' for --registry, got {path!r}")

    try:
        module = importlib.import_module(module_name)
        factory = getattr(module, attribute)
    except (ImportError, AttributeError) as e:
        raise ConfigurationError(f"Could not load ORM registry {path!r}: {e}") from e

    return factory()


def cmd_mapping(args, orm: OrmManager):
    """Print the generated index definitions."""
    from .mapper import ElasticMapper

    # No requests are made, a client is not needed
    mapper = ElasticMapper(client=None, orm=orm)
    definitions = mapper.build_index_definitions(orm.get_models())

    print(json.dumps(definitions, indent=2))


def cmd_define(args, orm: OrmManager):
    """Create or update the indices of all models."""
    from .mapper import ElasticMapper

    with get_client(args) as client:
        definitions = ElasticMapper(client, orm).define_indices()

    print(f"\n{'Index':<30} {'Types'}")
    print("-" * 65)
    for index, types in definitions.items():
        print(f"{index:<30} {', '.join(types)}")


def cmd_reindex(args, orm: OrmManager):
    """Re-index all entries of the selected models."""
    from .indexer import ElasticIndexer

    if args.models:
        models = [orm.get_model(name) for name in args.models]
    else:
        models = list(orm.get_models())

    settings = get_settings()
    resolver = IndexParameterResolver()
    enabled = [model for model in models if resolver.resolve(model) is not None]

    with get_client(args) as client:
        indexer = ElasticIndexer(client, orm, resolver=resolver, page_size=settings.page_size)
        indexer.index_models(enabled, workers=args.workers)

    print(f"Re-indexed {len(enabled)} model(s): {', '.join(model.name for model in enabled)}")


def cmd_search(args, orm: OrmManager):
    """Search the entries of a model."""
    from .search import ElasticSearch

    model = orm.get_model(args.model)
    settings = get_settings()

    options = {
        "query": args.query,
        "limit": args.limit or settings.search_limit,
        "offset": args.offset
    }

    with get_client(args) as client:
        search = ElasticSearch(client)
        result = search.search_by_query_string(model, options)

    if result is None:
        print(f"Elastic is disabled for model {args.model}")
        return

    hits = result.get("hits", {}).get("hits", [])
    print(f"\nQuery: {args.query}")
    print(f"Results: {len(hits)}\n")

    for hit in hits:
        print(f"{hit.get('_id')}  (score: {hit.get('_score') or 0:.2f})")

    primary_keys = search.get_primary_keys(result)
    print(f"\nPrimary keys: {', '.join(str(key) for key in primary_keys) or '(none)'}")


def main(argv: Optional[List[str]] = None):
    """Main entry point."""
    parser = argparse.ArgumentParser(
        prog="orm-elastic",
        description="orm-elastic — Synchronize ORM models with Elasticsearch"
    )

    # Global options
    parser.add_argument(
        "--hosts",
        help="Elasticsearch hosts (comma-separated)",
        default=None
    )
    parser.add_argument(
        "--api-key",
        dest="api_key",
        help="Elasticsearch API key",
        default=None
    )
    parser.add_argument(
        "--registry",
        required=True,
        help="Path to the ORM manager factory (module:callable)"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Show debug logging"
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # mapping command
    subparsers.add_parser("mapping", help="Print the generated mappings")

    # define command
    subparsers.add_parser("define", help="Create or update all indices")

    # reindex command
    reindex_parser = subparsers.add_parser("reindex", help="Re-index model entries")
    reindex_parser.add_argument("models", nargs="*", help="Model names (default: all)")
    reindex_parser.add_argument("--workers", type=int, default=1, help="Models indexed in parallel")

    # search command
    search_parser = subparsers.add_parser("search", help="Search the entries of a model")
    search_parser.add_argument("model", help="Model name")
    search_parser.add_argument("query", help="Query string")
    search_parser.add_argument("--limit", type=int, help="Max results")
    search_parser.add_argument("--offset", type=int, default=0, help="Offset of the first result")

    # Parse and dispatch
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    commands = {
        "mapping": cmd_mapping,
        "define": cmd_define,
        "reindex": cmd_reindex,
        "search": cmd_search,
    }

    if args.command not in commands:
        parser.print_help()
        return 1

    try:
        orm = load_orm(args.registry)
        commands[args.command](args, orm)
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
