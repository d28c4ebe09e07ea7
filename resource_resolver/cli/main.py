#!/usr/bin/env python3
"""CLI tool for resolving and mapping paths against an in-memory tree."""
import argparse
import logging
import sys
from types import SimpleNamespace
from typing import Optional, Sequence

from ..core.exceptions import ResolverError
from ..core.memory import MemoryResourceProvider, MemorySession
from ..core.resource import RESOURCE_TYPE_NON_EXISTING
from ..services.config import load_resolver_config
from ..services.factory import ResourceResolverFactory
from ..services.resolver import ResourceResolver

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_NOT_FOUND = 2


def _cmd_resolve(resolver: ResourceResolver, path: str) -> int:
    resource = resolver.resolve_request(SimpleNamespace(path_info=path))

    if resource.resource_type == RESOURCE_TYPE_NON_EXISTING:
        print(f"NON_EXISTING {resource.path}")
    else:
        print(f"{resource.path}\t{resource.resource_type}\t{resource.metadata.resolution_path}")
    return EXIT_OK


def _cmd_map(resolver: ResourceResolver, path: str) -> int:
    print(resolver.map(path))
    return EXIT_OK


def _cmd_get(resolver: ResourceResolver, path: str) -> int:
    resource = resolver.get_resource(path)
    if resource is None:
        logger.error(f"No resource at {path}")
        return EXIT_NOT_FOUND
    print(f"{resource.path}\t{resource.resource_type}")
    return EXIT_OK


def _cmd_ls(resolver: ResourceResolver, path: str) -> int:
    resource = resolver.get_resource(path)
    if resource is None:
        logger.error(f"No resource at {path}")
        return EXIT_NOT_FOUND
    for child in resolver.list_children(resource):
        print(f"{child.name}\t{child.resource_type}")
    return EXIT_OK


COMMANDS = {
    "resolve": (_cmd_resolve, "Resolve an external path to a resource"),
    "map": (_cmd_map, "Map a repository path to its external form"),
    "get": (_cmd_get, "Look up a resource (search path applies to relative paths)"),
    "ls": (_cmd_ls, "List the children of a resource"),
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="resource-resolver",
        description="Resolve request paths against a resource tree",
    )
    parser.add_argument("--config", help="Resolver configuration YAML")
    parser.add_argument("--tree", required=True, help="Resource tree YAML")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)
    for name, (_, help_text) in COMMANDS.items():
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("path", help="Path to operate on")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_resolver_config(args.config)
        session = MemorySession.from_yaml(args.tree)
        factory = ResourceResolverFactory(
            root_provider_factory=MemoryResourceProvider,
            config=config,
        )
        command, _ = COMMANDS[args.command]
        with factory.get_resource_resolver(session) as resolver:
            return command(resolver, args.path)
    except PermissionError as e:
        logger.error(f"Access denied: {e}")
        return EXIT_ERROR
    except ResolverError as e:
        logger.error(f"{args.command} failed: {e}")
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
