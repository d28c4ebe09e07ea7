"""
Resource Resolver - request path to resource resolution.

Turns external (URL) paths into resources of the repository tree and
repository paths back into external paths.

RESOLUTION:
===========

    resolve("/site/news/article.print.html")

    1. Exact virtual URL?            /home → /content/site/index.html
    2. For each mapping, in order:   /site/... → /content/site/...
       a. Try shortened candidates   /content/site/news/article.print.html
                                     /content/site/news/article.print
                                     /content/site/news/article   ← found
       b. The matched candidate, mapped back through the same rule,
          becomes the resolution path: /site/news/article
    3. Nothing found                 → None (resolve_request: NonExistingResource)

MAPPING:
========

    map("/content/site/news/article.html") → "/site/news/article.html"

Pure string translation; no lookup takes place.

RELATIVE LOOKUP:
================

    get_resource("components/header")
        /apps/components/header  ← first search path entry that exists
        /libs/components/header

Thread Safety:
    A resolver holds no mutable state besides its session reference. Each
    operation reads the factory's configuration snapshot once, at its start.
    Concurrent use is as safe as the session and providers behind it.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable, Iterator, Optional, Protocol

from ..core.adaptable import Adaptable
from ..core.exceptions import (
    AccessDeniedError,
    InvalidQueryError,
    QuerySyntaxError,
    RepositoryError,
    ResolutionError,
    ResolverError,
    RowConversionWarning,
)
from ..core.path_iterator import ResourcePathIterator
from ..core.paths import normalize_path
from ..core.provider import ResourceProviderEntry
from ..core.query import NodeResourceIterator, QueryResult, RowIterator
from ..core.resource import NonExistingResource, ResolvedResource, Resource
from ..core.rewrite_table import RewriteTable

if TYPE_CHECKING:
    from .factory import ResourceResolverFactory

logger = logging.getLogger(__name__)


class RequestLike(Protocol):
    """The part of an incoming request the resolver looks at."""
    path_info: Optional[str]


class ResourceResolver(Adaptable):
    """
    Session-bound resolver created by ResourceResolverFactory.

    The resolver does not own its session: close() only drops the
    reference, logging out stays with whoever opened the session.
    """

    def __init__(
        self,
        factory: "ResourceResolverFactory",
        session: Any,
        providers: ResourceProviderEntry,
    ):
        self._factory = factory
        self._session = session
        self._providers = providers

    # ---------- lifecycle ----------

    @property
    def is_live(self) -> bool:
        return self._session is not None

    def close(self) -> None:
        self._session = None

    def __enter__(self) -> "ResourceResolver":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def session(self) -> Any:
        """
        The session this resolver was created for.

        Raises:
            ResolverError: If the resolver has been closed
        """
        if self._session is None:
            raise ResolverError("Resource resolver has been closed")
        return self._session

    def get_session(self) -> Any:
        return self.session

    # ---------- resolution ----------

    def resolve_request(self, request: RequestLike) -> Resource:
        """
        Resolve the path info of a request; never returns None.

        A request without path info resolves "/". If nothing matches, a
        NonExistingResource carrying the path is returned.

        Raises:
            AccessDeniedError: If the item exists but is not readable
            ResolutionError: For any other failure
        """
        path_info = request.path_info
        if path_info is None:
            path_info = "/"

        resource = self.resolve(path_info)
        if resource is None:
            resource = NonExistingResource(path_info)
        return resource

    def resolve(self, path: str) -> Optional[Resource]:
        """
        Resolve an external path to a resource, or None if nothing matches.

        An empty path resolves "/".

        Raises:
            AccessDeniedError: If the item exists but is not readable
            ResolutionError: For any other failure
        """
        table = self._factory.snapshot.rewrite_table
        if not path:
            path = "/"

        real_path = table.virtual_to_real_uri(path)
        if real_path is not None:
            logger.debug(f"resolve: Using real url '{real_path}' for virtual url '{path}'")
            path = real_path

        try:
            return self._url_to_resource(path, table)
        except (AccessDeniedError, ResolutionError):
            raise
        except Exception as e:
            raise ResolutionError(f"Problem resolving {path}", path=path, cause=e) from e

    def map(self, resource_path: str) -> str:
        """Translate a repository path to its external form."""
        href = self._factory.snapshot.rewrite_table.to_external(resource_path)
        logger.debug(f"map: {resource_path} -> {href}")
        return href

    # ---------- lookup ----------

    def get_resource(self, path: str, base: Optional[Resource] = None) -> Optional[Resource]:
        """
        Look up a resource by path without applying mappings.

        Absolute paths are normalized; a path escaping the root yields None.
        Relative paths are resolved against base if given, otherwise
        against each search path entry in order.
        """
        if not path.startswith("/") and base is not None:
            path = f"{base.path.rstrip('/')}/{path}"

        if path.startswith("/"):
            normalized = normalize_path(path)
            if normalized is None:
                logger.debug(f"getResource: Path {path} escapes the root")
                return None
            raw = self._get_resource_internal(normalized)
            return ResolvedResource(raw, normalized) if raw is not None else None

        for prefix in self._factory.snapshot.search_path:
            resource = self.get_resource(prefix + path)
            if resource is not None:
                return resource
        return None

    def get_search_path(self) -> tuple[str, ...]:
        return self._factory.snapshot.search_path

    def list_children(self, parent: Resource) -> Iterator[Resource]:
        """
        Children of a resource; empty if it has none or cannot list them.
        """
        if parent.is_listable:
            return parent.list_children()

        try:
            resolved = self.get_resource(parent.path)
        except ResolverError as e:
            logger.warning(
                f"listChildren: Error trying to resolve parent resource {parent.path}: {e}"
            )
            resolved = None

        if resolved is not None and resolved.is_listable:
            return resolved.list_children()
        return iter(())

    # ---------- queries ----------

    def find_resources(self, query: str, language: str) -> Iterator[Resource]:
        """
        Resources for the nodes matched by a query, produced lazily.

        Raises:
            QuerySyntaxError: If the query is malformed
            ResolverError: For any other repository failure
        """
        result = self._execute_query(query, language)
        return NodeResourceIterator(self, result.nodes)

    def query_resources(
        self,
        query: str,
        language: str,
        on_warning: Optional[Callable[[RowConversionWarning], None]] = None,
    ) -> RowIterator:
        """
        Query result rows as {column: value} dicts, converted lazily.

        Raises:
            QuerySyntaxError: If the query is malformed
            ResolverError: For any other repository failure
        """
        result = self._execute_query(query, language)
        return RowIterator(result.column_names, result.rows, on_warning=on_warning)

    # ---------- adaptation ----------

    def adapt_to(self, target: type) -> Any:
        if self._session is not None and isinstance(self._session, target):
            return self._session
        return super().adapt_to(target)

    # ---------- implementation helpers ----------

    def _execute_query(self, query: str, language: str) -> QueryResult:
        executor = self._factory.query_executor
        if executor is None:
            raise ResolverError(
                "No query executor configured",
                context={"query": query, "language": language},
            )
        try:
            return executor.query(self.session, query, language)
        except InvalidQueryError as e:
            raise QuerySyntaxError(e.message, query=query, language=language, cause=e) from e
        except RepositoryError as e:
            raise ResolverError(e.message, context={"query": query, "language": language}) from e

    def _url_to_resource(self, uri: str, table: RewriteTable) -> Optional[Resource]:
        for mapping in table.mappings:
            mapped_uri = mapping.map_uri(uri)
            if mapped_uri is None:
                logger.debug(f"{mapping} cannot map {uri}")
                continue

            found = self._scan_path(mapped_uri)
            if found is not None:
                resource, matched_path = found
                uri_path = mapping.map_handle(matched_path)
                if uri_path is not None and uri_path != matched_path:
                    return ResolvedResource(resource, uri_path)
                return ResolvedResource(resource, matched_path)

            logger.debug(f"Cannot resolve {mapped_uri} to resource")

        logger.info(f"Could not resolve URL {uri} to a Resource")
        return None

    def _scan_path(self, uri_path: str) -> Optional[tuple[Resource, str]]:
        """First shortened candidate of uri_path that has a resource."""
        current = uri_path
        try:
            for current in ResourcePathIterator(uri_path):
                resource = self._get_resource_internal(current)
                if resource is not None:
                    return resource, current
        except AccessDeniedError:
            raise
        except Exception as e:
            raise ResolutionError(
                f"Problem trying {current} for request path {uri_path}",
                path=uri_path,
                cause=e,
            ) from e
        return None

    def _get_resource_internal(self, path: str) -> Optional[Resource]:
        """
        Provider resource at path, or None.

        Raises:
            AccessDeniedError: If an item exists but is not readable
        """
        resource = self._providers.get_resource(self, path)
        if resource is None:
            logger.debug(f"Cannot resolve path '{path}' to a resource")
        return resource
