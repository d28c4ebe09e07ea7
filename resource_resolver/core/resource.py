"""
Resource variants returned by the resolver.

Resources form a closed set:

    NodeResource         - found in the tree, created by a provider
    NonExistingResource  - sentinel for a request path that matched nothing
    ResolvedResource     - a provider resource paired with its resolution path

Providers create raw resources; the resolver wraps a found resource in a
ResolvedResource instead of mutating its metadata. Child listing is an
explicit capability (is_listable / list_children), not a type check.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Iterator, Optional

from .adaptable import Adaptable

if TYPE_CHECKING:
    from .provider import ResourceProvider

# Resource type reported for the non-existing sentinel
RESOURCE_TYPE_NON_EXISTING = "resolver:nonexisting"


@dataclass(frozen=True)
class ResourceMetadata:
    """
    Metadata describing how a resource was reached.

    Attributes:
        resolution_path: Portion of the request path consumed to reach the resource
        properties: Provider supplied metadata (content type, modification time, ...)
    """
    resolution_path: Optional[str] = None
    properties: MappingProxyType = field(
        default_factory=lambda: MappingProxyType({})
    )

    def with_resolution_path(self, resolution_path: str) -> "ResourceMetadata":
        return replace(self, resolution_path=resolution_path)


class Resource(Adaptable):
    """Common interface of all resources."""

    path: str
    resource_type: str
    metadata: ResourceMetadata

    @property
    def is_listable(self) -> bool:
        """Whether list_children() enumerates anything for this resource."""
        return False

    def list_children(self) -> Iterator["Resource"]:
        return iter(())

    @property
    def name(self) -> str:
        return self.path.rstrip("/").rsplit("/", 1)[-1]

    def __repr__(self) -> str:
        return f"{type(self).__name__}(path={self.path!r}, type={self.resource_type!r})"


class NodeResource(Resource):
    """
    Resource backed by a node in the repository tree.

    Created per lookup by a provider; children are enumerated through the
    provider that created it.
    """

    def __init__(
        self,
        provider: "ResourceProvider",
        path: str,
        resource_type: str,
        properties: Optional[dict[str, Any]] = None,
        metadata: Optional[ResourceMetadata] = None,
    ):
        self._provider = provider
        self.path = path
        self.resource_type = resource_type
        self.properties = MappingProxyType(dict(properties or {}))
        self.metadata = metadata or ResourceMetadata()

    @property
    def provider(self) -> "ResourceProvider":
        return self._provider

    @property
    def is_listable(self) -> bool:
        return True

    def list_children(self) -> Iterator[Resource]:
        return self._provider.list_children(self)


class NonExistingResource(Resource):
    """Sentinel returned for a request path that resolves to nothing."""

    def __init__(self, path: str):
        self.path = path
        self.resource_type = RESOURCE_TYPE_NON_EXISTING
        self.metadata = ResourceMetadata(resolution_path=path)


class ResolvedResource(Resource):
    """
    A provider resource together with the resolution path that reached it.

    Delegates everything else to the wrapped resource.
    """

    def __init__(self, resource: Resource, resolution_path: str):
        self._resource = resource
        self.path = resource.path
        self.resource_type = resource.resource_type
        self.metadata = resource.metadata.with_resolution_path(resolution_path)

    @property
    def resolution_path(self) -> str:
        return self.metadata.resolution_path

    @property
    def is_listable(self) -> bool:
        return self._resource.is_listable

    def list_children(self) -> Iterator[Resource]:
        return self._resource.list_children()

    def unwrap(self) -> Resource:
        """Return the provider resource."""
        return self._resource

    def adapt_to(self, target):
        adapted = super().adapt_to(target)
        if adapted is None:
            adapted = self._resource.adapt_to(target)
        return adapted

    def __getattr__(self, name: str) -> Any:
        # only reached for attributes not defined on the wrapper
        if name == "_resource":
            raise AttributeError(name)
        return getattr(self._resource, name)
