"""
Type adaptation for resources and resolvers.

adapt_to(target) returns an object of the requested type derived from the
adaptable, or None when no adaptation exists. Adapter factories are
registered per (source class, target type) pair and looked up along the
source's MRO.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

AdapterFactory = Callable[[Any], Any]

_adapter_factories: dict[tuple[type, type], AdapterFactory] = {}


def register_adapter(source: type, target: type, factory: AdapterFactory) -> None:
    """Register a factory adapting instances of source to target."""
    _adapter_factories[(source, target)] = factory
    logger.debug(f"Registered adapter {source.__name__} -> {target.__name__}")


def unregister_adapter(source: type, target: type) -> None:
    """Remove a previously registered adapter factory, if present."""
    _adapter_factories.pop((source, target), None)


class Adaptable:
    """Base class providing the default adapt_to() behaviour."""

    def adapt_to(self, target: type[T]) -> Optional[T]:
        if isinstance(self, target):
            return self

        for cls in type(self).__mro__:
            factory = _adapter_factories.get((cls, target))
            if factory is not None:
                return factory(self)
        return None
