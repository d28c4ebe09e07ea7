"""
Rewrite rules between the internal (repository) and external (URL) namespaces.

A Mapping is a single bidirectional prefix substitution:

    internal "/content/site"  <->  external "/site"

    map_uri("/site/page.html")            → "/content/site/page.html"
    map_handle("/content/site/page.html") → "/site/page.html"

Matching is a plain string-prefix test. No normalization and no
percent-decoding happens here; callers decode before applying rules.

CONFIGURATION FORMAT:
=====================

    "<internal><op><external>"

    op ':'  both directions
    op '>'  inbound only (map_uri)
    op '<'  outbound only (map_handle)

The legacy "/-/" form is read as internal "/" and external "/".
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .exceptions import ConfigurationError


class MappingDirection(Enum):
    """Which translations a Mapping takes part in."""
    BOTH = ":"
    INBOUND = ">"
    OUTBOUND = "<"


@dataclass(frozen=True)
class Mapping:
    """
    Bidirectional mapping between internal and external path prefixes.

    Attributes:
        internal: Prefix in the repository namespace (e.g., /content/site)
        external: Prefix in the URL namespace (e.g., /site)
        direction: Restricts the rule to one translation direction
    """
    internal: str
    external: str
    direction: MappingDirection = MappingDirection.BOTH

    @classmethod
    def parse(cls, config: str) -> "Mapping":
        """
        Create a Mapping from its configuration string.

        Raises:
            ConfigurationError: If the string has no direction operator
        """
        config = config.strip()

        # the operator is the one directly followed by the external prefix's "/";
        # node names may contain ":" themselves
        positions = [
            (index, direction)
            for index, char in enumerate(config)
            for direction in MappingDirection
            if char == direction.value and config.startswith("/", index + 1)
        ]
        if positions:
            index, direction = positions[0]
            return cls(
                internal=config[:index],
                external=config[index + 1:],
                direction=direction,
            )

        # legacy "/-/": the dash separates two slash-terminated prefixes
        if "/-/" in config:
            index = config.index("/-/")
            return cls(internal=config[:index + 1], external=config[index + 2:])

        raise ConfigurationError(
            f"Invalid mapping configuration: {config!r}",
            context={"mapping": config},
        )

    def matches_uri(self, uri: str) -> bool:
        """Check if an external path starts with this mapping's external prefix."""
        return uri.startswith(self.external)

    def matches_handle(self, handle: str) -> bool:
        """Check if an internal path starts with this mapping's internal prefix."""
        return handle.startswith(self.internal)

    def map_uri(self, uri: str) -> Optional[str]:
        """Convert an external path to its internal path, or None if not handled."""
        if self.direction is MappingDirection.OUTBOUND or not self.matches_uri(uri):
            return None
        return self.internal + uri[len(self.external):]

    def map_handle(self, handle: str) -> Optional[str]:
        """Convert an internal path to its external path, or None if not handled."""
        if self.direction is MappingDirection.INBOUND or not self.matches_handle(handle):
            return None
        return self.external + handle[len(self.internal):]

    def __str__(self) -> str:
        return f"Mapping({self.internal}{self.direction.value}{self.external})"


# Identity rule used when no mappings are configured
DIRECT_MAPPING = Mapping(internal="/", external="/")
