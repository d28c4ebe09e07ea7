"""
Resource resolver factory and configuration snapshots.

The factory owns the active ResolverSnapshot (rewrite table + search path).
Reconfiguration builds a complete new snapshot and swaps the reference,
so a resolution in progress sees either the old or the new configuration,
never a mix of both.

USAGE:
======

    factory = ResourceResolverFactory(
        config=load_resolver_config("resolver.yaml"),
        root_provider_factory=MemoryResourceProvider,
    )
    with factory.get_resource_resolver(session) as resolver:
        resource = resolver.resolve("/site/page.html")
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Optional

from ..core.provider import ResourceProvider, ResourceProviderEntry
from ..core.query import QueryExecutor
from ..core.rewrite_table import RewriteTable
from .config import ResolverConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolverSnapshot:
    """Immutable configuration a resolution runs against."""
    rewrite_table: RewriteTable
    search_path: tuple[str, ...]

    @classmethod
    def from_config(cls, config: ResolverConfig) -> "ResolverSnapshot":
        return cls(
            rewrite_table=RewriteTable.build(config.mappings, config.virtual_urls),
            search_path=tuple(config.search_path),
        )


class ResourceResolverFactory:
    """
    Creates session-bound ResourceResolvers sharing one configuration.

    Args:
        root_provider_factory: Builds the root resource provider for a session
        config: Initial resolver configuration (defaults if None)
        query_executor: Runs queries for find_resources/query_resources
    """

    def __init__(
        self,
        root_provider_factory: Callable[[Any], ResourceProvider],
        config: Optional[ResolverConfig] = None,
        query_executor: Optional[QueryExecutor] = None,
    ):
        self._root_provider_factory = root_provider_factory
        self._query_executor = query_executor
        self._lock = threading.Lock()
        self._snapshot = ResolverSnapshot.from_config(config or ResolverConfig())
        # registrations shared by every resolver; the root is per session
        self._providers = ResourceProviderEntry(root_provider=_NoResourceProvider())

    @property
    def snapshot(self) -> ResolverSnapshot:
        """The current configuration snapshot."""
        return self._snapshot

    @property
    def query_executor(self) -> Optional[QueryExecutor]:
        return self._query_executor

    @property
    def rewrite_table(self) -> RewriteTable:
        return self._snapshot.rewrite_table

    @property
    def search_path(self) -> tuple[str, ...]:
        return self._snapshot.search_path

    def reconfigure(self, config: ResolverConfig) -> ResolverSnapshot:
        """Build a snapshot from config and make it the active one."""
        snapshot = ResolverSnapshot.from_config(config)
        with self._lock:
            self._snapshot = snapshot
        logger.info(
            f"RESOURCE_RESOLVER: Reconfigured with {len(snapshot.rewrite_table.mappings)} "
            f"mappings, search path {list(snapshot.search_path)}"
        )
        return snapshot

    def register_provider(self, prefix: str, provider: ResourceProvider) -> None:
        """Mount a provider at a path prefix for all resolvers created afterwards."""
        self._providers.register(prefix, provider)

    def unregister_provider(self, prefix: str) -> bool:
        return self._providers.unregister(prefix)

    def get_resource_resolver(self, session: Any) -> "ResourceResolver":
        """Create a resolver bound to session. The caller keeps ownership of session."""
        from .resolver import ResourceResolver

        providers = self._providers.with_root(self._root_provider_factory(session))
        return ResourceResolver(factory=self, session=session, providers=providers)


class _NoResourceProvider:
    """Placeholder root of the factory's shared registry."""

    def get_resource(self, resolver, path):
        return None

    def list_children(self, parent):
        return iter(())
