"""Resolver services: configuration, factory and the resolver itself."""

from .config import ResolverConfig, load_resolver_config
from .factory import ResolverSnapshot, ResourceResolverFactory
from .resolver import RequestLike, ResourceResolver

__all__ = [
    "ResolverConfig",
    "load_resolver_config",
    "ResolverSnapshot",
    "ResourceResolverFactory",
    "RequestLike",
    "ResourceResolver",
]
