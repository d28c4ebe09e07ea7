"""
Resolution building blocks: rewrite rules, path shortening, resources,
providers and query result adaptation.
"""

from .exceptions import (
    AccessDeniedError,
    ConfigurationError,
    InvalidQueryError,
    QuerySyntaxError,
    RepositoryError,
    ResolutionError,
    ResolverError,
    RowConversionWarning,
    ValueConversionError,
)
from .mapping import DIRECT_MAPPING, Mapping, MappingDirection
from .memory import MemoryResourceProvider, MemorySession, Node
from .path_iterator import ResourcePathIterator
from .paths import normalize_path
from .provider import ResourceProvider, ResourceProviderEntry
from .query import NodeResourceIterator, QueryExecutor, QueryResult, RowIterator
from .resource import (
    NodeResource,
    NonExistingResource,
    ResolvedResource,
    Resource,
    ResourceMetadata,
)
from .rewrite_table import RewriteTable
from .values import PropertyType, RepositoryValue, to_python_value

__all__ = [
    # Errors
    "AccessDeniedError",
    "ConfigurationError",
    "InvalidQueryError",
    "QuerySyntaxError",
    "RepositoryError",
    "ResolutionError",
    "ResolverError",
    "RowConversionWarning",
    "ValueConversionError",
    # Rewriting
    "DIRECT_MAPPING",
    "Mapping",
    "MappingDirection",
    "RewriteTable",
    "ResourcePathIterator",
    "normalize_path",
    # Resources and providers
    "NodeResource",
    "NonExistingResource",
    "ResolvedResource",
    "Resource",
    "ResourceMetadata",
    "ResourceProvider",
    "ResourceProviderEntry",
    "MemoryResourceProvider",
    "MemorySession",
    "Node",
    # Queries
    "NodeResourceIterator",
    "QueryExecutor",
    "QueryResult",
    "RowIterator",
    "PropertyType",
    "RepositoryValue",
    "to_python_value",
]
