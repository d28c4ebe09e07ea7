"""
In-memory repository session and resource provider.

MemorySession is a dict-backed hierarchical node store implementing the
session side of the resolver's collaborators. MemoryResourceProvider
exposes its nodes as NodeResources.

Tree files are nested YAML mappings. Mapping values are child nodes,
scalars and lists are properties, and the "resourceType" property sets
the node's resource type:

    content:
      resourceType: site/page
      title: Home
      news:
        article.html:
          resourceType: site/article
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, Iterable, Iterator, Optional

import yaml

from .exceptions import AccessDeniedError, ConfigurationError, RepositoryError
from .resource import NodeResource, Resource

if TYPE_CHECKING:
    from ..services.resolver import ResourceResolver

logger = logging.getLogger(__name__)

DEFAULT_NODE_TYPE = "nt:unstructured"
RESOURCE_TYPE_PROPERTY = "resourceType"


@dataclass
class Node:
    """A node in the in-memory tree."""
    path: str
    resource_type: str = DEFAULT_NODE_TYPE
    properties: dict[str, Any] = field(default_factory=dict)


def _parent_path(path: str) -> Optional[str]:
    if path == "/":
        return None
    parent = path.rsplit("/", 1)[0]
    return parent or "/"


def _child_path(parent: str, name: str) -> str:
    return f"/{name}" if parent == "/" else f"{parent}/{name}"


class MemorySession:
    """
    Session over an in-memory node tree.

    Paths listed in `denied` (and everything below them) exist but are
    not readable: lookups raise AccessDeniedError and listings skip them.
    """

    def __init__(self, user_id: str = "anonymous", denied: Iterable[str] = ()):
        self.user_id = user_id
        self._nodes: dict[str, Node] = {"/": Node(path="/", resource_type="rep:root")}
        self._children: dict[str, list[str]] = {"/": []}
        self._denied = tuple(p.rstrip("/") or "/" for p in denied)
        self._live = True

    @classmethod
    def from_tree(cls, tree: dict[str, Any], **kwargs: Any) -> "MemorySession":
        """Create a session holding the nodes of a nested mapping."""
        session = cls(**kwargs)
        session._load_children("/", tree)
        return session

    @classmethod
    def from_yaml(cls, path: Path | str, **kwargs: Any) -> "MemorySession":
        """
        Create a session from a YAML tree file.

        Raises:
            ConfigurationError: If the file cannot be read or is not a mapping
        """
        path = Path(path)
        try:
            with open(path, "r", encoding="utf-8") as f:
                tree = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(
                f"Failed to load tree from {path}: {e}",
                context={"path": str(path)},
            ) from e

        if not isinstance(tree, dict):
            raise ConfigurationError(
                f"Tree file must contain a mapping: {path}",
                context={"path": str(path)},
            )
        session = cls.from_tree(tree, **kwargs)
        logger.info(f"Loaded {len(session._nodes)} nodes from {path}")
        return session

    def _load_children(self, parent: str, tree: dict[str, Any]) -> None:
        properties = self._nodes[parent].properties
        for key, value in tree.items():
            if isinstance(value, dict):
                child = _child_path(parent, str(key))
                self.add_node(child)
                self._load_children(child, value)
            elif key == RESOURCE_TYPE_PROPERTY:
                self._nodes[parent].resource_type = str(value)
            else:
                properties[str(key)] = value

    @property
    def is_live(self) -> bool:
        return self._live

    def logout(self) -> None:
        self._live = False

    def add_node(
        self,
        path: str,
        resource_type: str = DEFAULT_NODE_TYPE,
        properties: Optional[dict[str, Any]] = None,
    ) -> Node:
        """Add a node, creating missing ancestors. Returns the (new or existing) node."""
        self._check_live()
        if path in self._nodes:
            return self._nodes[path]

        parent = _parent_path(path)
        if parent is not None and parent not in self._nodes:
            self.add_node(parent)

        node = Node(path=path, resource_type=resource_type, properties=dict(properties or {}))
        self._nodes[path] = node
        self._children[path] = []
        if parent is not None:
            self._children[parent].append(path)
        return node

    def is_denied(self, path: str) -> bool:
        return any(path == d or path.startswith(d.rstrip("/") + "/") for d in self._denied)

    def get_node(self, path: str) -> Optional[Node]:
        """
        Return the node at path, or None if there is none.

        Raises:
            AccessDeniedError: If the node exists but is not readable
            RepositoryError: If the session has been logged out
        """
        self._check_live()
        node = self._nodes.get(path)
        if node is not None and self.is_denied(path):
            raise AccessDeniedError(f"Access denied to {path}", path=path)
        return node

    def child_paths(self, path: str) -> list[str]:
        """Readable child paths of a node, in insertion order."""
        self._check_live()
        return [p for p in self._children.get(path, []) if not self.is_denied(p)]

    def _check_live(self) -> None:
        if not self._live:
            raise RepositoryError(
                "Session has been logged out",
                context={"user": self.user_id},
            )


class MemoryResourceProvider:
    """Resource provider serving the nodes of a MemorySession."""

    def __init__(self, session: MemorySession):
        self._session = session

    @property
    def session(self) -> MemorySession:
        return self._session

    def get_resource(self, resolver: "ResourceResolver", path: str) -> Optional[Resource]:
        node = self._session.get_node(path)
        if node is None:
            return None
        return NodeResource(self, node.path, node.resource_type, node.properties)

    def list_children(self, parent: Resource) -> Iterator[Resource]:
        for path in self._session.child_paths(parent.path):
            node = self._session.get_node(path)
            if node is not None:
                yield NodeResource(self, node.path, node.resource_type, node.properties)
