"""
Ordered rewrite table with virtual URL aliases.

The table is an immutable snapshot: it is built once from configuration
and replaced as a whole on reconfiguration, never mutated in place.

Ingress (external → internal):
    1. exact virtual alias → real path
    2. first mapping whose map_uri() matches
    3. identity if no mapping matches

Egress (internal → external):
    1. first mapping whose map_handle() matches
    2. identity if no mapping matches
    3. exact real path → virtual alias
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Optional

from .exceptions import ConfigurationError
from .mapping import DIRECT_MAPPING, Mapping

logger = logging.getLogger(__name__)


def _parse_virtual_urls(entries: Iterable[str]) -> dict[str, str]:
    """Parse "virtual:real" strings, keeping the first entry for each virtual URL."""
    virtual_to_real: dict[str, str] = {}
    for entry in entries:
        virtual, sep, real = entry.strip().partition(":")
        if not sep or not virtual or not real:
            raise ConfigurationError(
                f"Invalid virtual URL configuration: {entry!r}",
                context={"virtual_url": entry},
            )
        if virtual in virtual_to_real:
            logger.warning(
                f"Ignoring duplicate virtual URL {virtual} -> {real}, "
                f"already mapped to {virtual_to_real[virtual]}"
            )
            continue
        virtual_to_real[virtual] = real
    return virtual_to_real


@dataclass(frozen=True)
class RewriteTable:
    """
    Immutable, ordered list of Mappings plus virtual URL aliases.

    Mapping order is precedence: the lowest index that matches wins.
    """
    mappings: tuple[Mapping, ...] = (DIRECT_MAPPING,)
    virtual_to_real: MappingProxyType = field(
        default_factory=lambda: MappingProxyType({})
    )
    real_to_virtual: MappingProxyType = field(
        default_factory=lambda: MappingProxyType({})
    )

    @classmethod
    def build(
        cls,
        mappings: Iterable[Mapping | str] = (),
        virtual_urls: Iterable[str] = (),
    ) -> "RewriteTable":
        """
        Build a table from mapping objects or configuration strings.

        An empty mapping list yields a table holding only DIRECT_MAPPING.
        """
        parsed = tuple(
            m if isinstance(m, Mapping) else Mapping.parse(m) for m in mappings
        )
        if not parsed:
            parsed = (DIRECT_MAPPING,)

        virtual_to_real = _parse_virtual_urls(virtual_urls)
        real_to_virtual: dict[str, str] = {}
        for virtual, real in virtual_to_real.items():
            real_to_virtual.setdefault(real, virtual)

        return cls(
            mappings=parsed,
            virtual_to_real=MappingProxyType(virtual_to_real),
            real_to_virtual=MappingProxyType(real_to_virtual),
        )

    def virtual_to_real_uri(self, uri: str) -> Optional[str]:
        """Real path for an exact virtual URL, or None."""
        return self.virtual_to_real.get(uri)

    def real_to_virtual_uri(self, path: str) -> Optional[str]:
        """Virtual URL for an exact real path, or None."""
        return self.real_to_virtual.get(path)

    def to_internal(self, external_path: str) -> str:
        """Translate an external path to the repository namespace."""
        real = self.virtual_to_real_uri(external_path)
        if real is not None:
            external_path = real

        for mapping in self.mappings:
            internal = mapping.map_uri(external_path)
            if internal is not None:
                return internal
        return external_path

    def to_external(self, internal_path: str) -> str:
        """Translate a repository path to the external namespace."""
        href = None
        for mapping in self.mappings:
            href = mapping.map_handle(internal_path)
            if href is not None:
                break
        if href is None:
            href = internal_path

        virtual = self.real_to_virtual_uri(href)
        if virtual is not None:
            logger.debug(f"map: Using virtual URI {virtual} for path {href}")
            href = virtual
        return href
