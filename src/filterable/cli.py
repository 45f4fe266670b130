"""CLI entrypoint for the Filterable query client."""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from filterable.config.loader import (
    DEFAULT_CONFIG_PATH,
    get_transport_settings,
    join_url,
    load_config,
)
from filterable.errors import FilterableError, TransportError
from filterable.models import ModelCollection, Ordering, Resource
from filterable.query.builder import QueryBuilder
from filterable.transport import RequestsTransport
from filterable.utils.logging import get_logger, set_log_level

logger = get_logger(__name__)


def _parse_assignment(raw: str, option: str) -> Tuple[str, str]:
    name, sep, value = raw.partition("=")
    if not sep or not name:
        raise ValueError(f"{option} expects NAME=VALUE, got: {raw}")
    return name, value


def _parse_ordering(raw: str) -> Ordering:
    """Parse "attribute" or "attribute:direction"."""
    attribute, _, direction = raw.partition(":")
    direction = (direction or "asc").lower()
    if direction not in ("asc", "desc"):
        raise ValueError(f"--order direction must be asc or desc, got: {direction}")
    return Ordering(attribute=attribute, direction=direction)


def _load_optional_config(path: Optional[Path]) -> Dict[str, Any]:
    """Load the given config file, or the default one when it exists."""
    if path is not None:
        return load_config(path)
    if DEFAULT_CONFIG_PATH.exists():
        return load_config(DEFAULT_CONFIG_PATH)
    return {}


def build_query(args: argparse.Namespace, resource: Resource) -> QueryBuilder:
    """Apply the CLI query options to a fresh builder."""
    query = resource.query()

    for raw in args.where or []:
        name, value = _parse_assignment(raw, "--where")
        query.where(name, value)

    if args.order:
        query.order_by(*[_parse_ordering(raw) for raw in args.order])

    if args.limit is not None:
        query.set_limit(args.limit)
    if args.page is not None:
        query.set_page(args.page)

    for raw in args.param or []:
        name, value = _parse_assignment(raw, "--param")
        query.append(name, value)

    return query


def cmd_url(args: argparse.Namespace) -> int:
    config = _load_optional_config(args.config)
    base_url = args.base_url or config.get("base_url")
    resource = Resource(join_url(base_url, args.resource))
    query = build_query(args, resource)
    print(query.to_url())
    return 0


def cmd_get(args: argparse.Namespace) -> int:
    config = _load_optional_config(args.config)
    base_url = args.base_url or config.get("base_url")
    failures: List[Tuple[Any, int]] = []

    def on_error(body: Any, status_code: int) -> None:
        failures.append((body, status_code))

    with RequestsTransport(get_transport_settings(config)) as transport:
        resource = Resource(join_url(base_url, args.resource), transport=transport)
        query = build_query(args, resource)
        logger.info(f"Fetching {query.to_url()}")
        try:
            collection: Optional[ModelCollection] = query.get(error=on_error).result()
        except TransportError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

    if failures:
        body, status_code = failures[0]
        print(f"Error: request failed with status {status_code}", file=sys.stderr)
        if body is not None:
            print(json.dumps(body, indent=2, default=str), file=sys.stderr)
        return 1
    if collection is None:
        print("Error: unexpected response status", file=sys.stderr)
        return 1

    print(json.dumps(collection.to_list(), indent=2, default=str))
    logger.info(f"Fetched {len(collection)} records (page {query.current_page()})")
    return 0


def _add_query_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("resource", help="Resource path (joined to base_url) or absolute URL")
    parser.add_argument("--where", action="append", metavar="FILTER=VALUE", help="Filter constraint (repeatable)")
    parser.add_argument("--order", action="append", metavar="ATTR[:asc|desc]", help="Ordering (repeatable)")
    parser.add_argument("--limit", type=int, help="Page size (default: 15)")
    parser.add_argument("--page", type=int, help="Page number (default: 1)")
    parser.add_argument("--param", action="append", metavar="NAME=VALUE", help="Extra query parameter (repeatable)")
    parser.add_argument("--config", type=Path, help=f"Config file (default: {DEFAULT_CONFIG_PATH})")
    parser.add_argument("--base-url", help="Base URL, overrides config base_url")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="filterable", description="Query a Filterable REST API")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    url_parser = subparsers.add_parser("url", help="Print the request URL for a query")
    _add_query_options(url_parser)
    url_parser.set_defaults(func=cmd_url)

    get_parser = subparsers.add_parser("get", help="Fetch a page of records as JSON")
    _add_query_options(get_parser)
    get_parser.set_defaults(func=cmd_get)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config_level = _load_optional_config(args.config).get("log_level")
        set_log_level("DEBUG" if args.verbose else config_level)
        return args.func(args)
    except (FileNotFoundError, ValueError, FilterableError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
