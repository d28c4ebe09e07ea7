"""
Resource providers and the provider registry.

A ResourceProvider turns an absolute internal path into a Resource or None.
ResourceProviderEntry is the tree of providers consulted by the resolver:
providers registered at a path prefix take precedence over the root
provider, and longer prefixes take precedence over shorter ones.
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterator, Optional, Protocol, runtime_checkable

from .resource import Resource

if TYPE_CHECKING:
    from ..services.resolver import ResourceResolver

logger = logging.getLogger(__name__)


@runtime_checkable
class ResourceProvider(Protocol):
    """Interface implemented by resource providers."""

    def get_resource(self, resolver: "ResourceResolver", path: str) -> Optional[Resource]:
        """
        Return the resource at an absolute internal path, or None.

        Raises:
            AccessDeniedError: If the item exists but is not readable
        """
        ...

    def list_children(self, parent: Resource) -> Iterator[Resource]:
        ...


@dataclass(frozen=True)
class ProviderRegistration:
    """A provider mounted at an absolute path prefix."""
    prefix: str
    provider: ResourceProvider

    def matches(self, path: str) -> bool:
        """Check if path is the prefix itself or below it."""
        return path == self.prefix or path.startswith(self.prefix.rstrip("/") + "/")


class ResourceProviderEntry:
    """
    Registry of resource providers rooted at a default provider.

    Registrations are kept sorted by prefix length (longest first) so the
    most specific provider is asked first. The sorted list is replaced, not
    mutated, on (un)registration so concurrent lookups see a stable list.
    """

    def __init__(self, root_provider: ResourceProvider):
        self._root_provider = root_provider
        self._registrations: tuple[ProviderRegistration, ...] = ()
        self._lock = threading.Lock()

    @property
    def root_provider(self) -> ResourceProvider:
        return self._root_provider

    @property
    def registrations(self) -> tuple[ProviderRegistration, ...]:
        return self._registrations

    def with_root(self, root_provider: ResourceProvider) -> "ResourceProviderEntry":
        """New entry with a different root provider and the current registrations."""
        entry = ResourceProviderEntry(root_provider)
        entry._registrations = self._registrations
        return entry

    def register(self, prefix: str, provider: ResourceProvider) -> None:
        """Mount a provider at an absolute path prefix, replacing any existing one."""
        if not prefix.startswith("/"):
            raise ValueError(f"Provider prefix must be absolute: {prefix!r}")

        with self._lock:
            registrations = [r for r in self._registrations if r.prefix != prefix]
            registrations.append(ProviderRegistration(prefix=prefix, provider=provider))
            registrations.sort(key=lambda r: len(r.prefix), reverse=True)
            self._registrations = tuple(registrations)
        logger.info(f"Registered resource provider {type(provider).__name__} at {prefix}")

    def unregister(self, prefix: str) -> bool:
        """Remove the provider mounted at prefix. Returns False if none was."""
        with self._lock:
            remaining = tuple(r for r in self._registrations if r.prefix != prefix)
            removed = len(remaining) != len(self._registrations)
            self._registrations = remaining
        if removed:
            logger.info(f"Unregistered resource provider at {prefix}")
        return removed

    def get_resource(self, resolver: "ResourceResolver", path: str) -> Optional[Resource]:
        """
        Ask mounted providers, most specific first, then the root provider.

        A provider that returns None does not stop the search; the next
        less specific provider is asked.
        """
        for registration in self._registrations:
            if registration.matches(path):
                resource = registration.provider.get_resource(resolver, path)
                if resource is not None:
                    return resource
        return self._root_provider.get_resource(resolver, path)
