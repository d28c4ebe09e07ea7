"""
Tests for ResourceResolver.

Tests cover:
- resolve() through mappings, virtual URLs and path shortening
- resolve_request() and the non-existing sentinel
- map() as a pure string transform
- get_resource() with normalization, base resources and the search path
- list_children() capability handling
- Error wrapping and access denial
- adapt_to() and resolver lifecycle
- Configuration snapshot swapping
"""
from types import SimpleNamespace

import pytest

from resource_resolver.core.exceptions import (
    AccessDeniedError,
    ResolutionError,
    ResolverError,
)
from resource_resolver.core.memory import MemorySession
from resource_resolver.core.resource import (
    RESOURCE_TYPE_NON_EXISTING,
    NodeResource,
    NonExistingResource,
)
from resource_resolver.services.config import ResolverConfig
from resource_resolver.services.resolver import ResourceResolver


class FailingProvider:
    """Provider whose lookups always fail."""

    def get_resource(self, resolver, path):
        raise RuntimeError(f"backend down for {path}")

    def list_children(self, parent):
        raise RuntimeError("backend down")


# =============================================================================
# resolve()
# =============================================================================

class TestResolve:
    """Tests for resolve(path)."""

    def test_exact_match(self, resolver):
        resource = resolver.resolve("/site/news/article")
        assert resource.path == "/content/site/news/article"
        assert resource.resource_type == "site/article"

    def test_progressive_shortening_records_consumed_prefix(self, resolver):
        resource = resolver.resolve("/site/news/article.print.html")
        assert resource.path == "/content/site/news/article"
        assert resource.metadata.resolution_path == "/site/news/article"

    def test_progressive_shortening_with_direct_mapping(self, resolver):
        """A resource only at /a/b is found for /a/b/c.ext."""
        resource = resolver.resolve("/a/b/c.ext")
        assert resource.path == "/a/b"
        assert resource.metadata.resolution_path == "/a/b"

    def test_node_name_with_extension_wins_over_shorter_path(self, resolver):
        resource = resolver.resolve("/site/index.html")
        assert resource.path == "/content/site/index.html"
        assert resource.metadata.resolution_path == "/site/index.html"

    def test_empty_path_resolves_root(self, resolver):
        resource = resolver.resolve("")
        assert resource.path == "/"
        assert resource.metadata.resolution_path == "/"

    def test_later_mapping_tried_when_earlier_finds_nothing(self, resolver):
        resource = resolver.resolve("/apps/x.html")
        assert resource.path == "/apps/x"
        assert resource.metadata.resolution_path == "/apps/x"

    def test_no_match_returns_none(self, resolver):
        assert resolver.resolve("/nonexistent") is None

    def test_virtual_url_behaves_like_real(self, resolver):
        virtual = resolver.resolve("/home")
        real = resolver.resolve("/site/index.html")
        assert virtual.path == real.path == "/content/site/index.html"
        assert virtual.metadata.resolution_path == real.metadata.resolution_path

    def test_resolved_resource_wraps_provider_resource(self, resolver):
        resource = resolver.resolve("/site/news/article.html")
        assert isinstance(resource.unwrap(), NodeResource)
        assert resource.unwrap().metadata.resolution_path is None
        assert resource.properties["title"] == "Article"

    def test_first_mapping_wins(self, factory, session):
        factory.reconfigure(ResolverConfig(mappings=["/apps/:/", "/libs/:/"]))
        resolver = factory.get_resource_resolver(session)
        assert resolver.resolve("/x").path == "/apps/x"

    def test_access_denied_propagates_unwrapped(self, resolver):
        with pytest.raises(AccessDeniedError) as exc_info:
            resolver.resolve("/content/private/secret.html")
        assert not isinstance(exc_info.value, ResolverError)
        assert exc_info.value.path == "/content/private/secret"

    def test_provider_failure_wrapped(self, factory, session):
        factory.register_provider("/broken", FailingProvider())
        resolver = factory.get_resource_resolver(session)

        with pytest.raises(ResolutionError) as exc_info:
            resolver.resolve("/broken/page.html")
        assert exc_info.value.path == "/broken/page.html"
        assert isinstance(exc_info.value.cause, RuntimeError)

    def test_logged_out_session_wrapped(self, resolver, session):
        session.logout()
        with pytest.raises(ResolutionError):
            resolver.resolve("/site/index.html")


# =============================================================================
# resolve_request()
# =============================================================================

class TestResolveRequest:
    """Tests for resolve_request(request)."""

    def test_found(self, resolver):
        resource = resolver.resolve_request(SimpleNamespace(path_info="/site/news/article.html"))
        assert resource.path == "/content/site/news/article"

    def test_missing_path_info_resolves_root(self, resolver):
        resource = resolver.resolve_request(SimpleNamespace(path_info=None))
        assert resource.path == "/"

    def test_no_match_returns_sentinel(self, resolver):
        resource = resolver.resolve_request(SimpleNamespace(path_info="/nonexistent"))
        assert isinstance(resource, NonExistingResource)
        assert resource.path == "/nonexistent"
        assert resource.resource_type == RESOURCE_TYPE_NON_EXISTING
        assert resource.metadata.resolution_path == "/nonexistent"

    def test_access_denied_propagates(self, resolver):
        with pytest.raises(AccessDeniedError):
            resolver.resolve_request(SimpleNamespace(path_info="/content/private/secret"))


# =============================================================================
# map()
# =============================================================================

class TestMap:
    """Tests for map(resource_path)."""

    def test_mapped_path(self, resolver):
        assert resolver.map("/content/site/news/article.html") == "/site/news/article.html"

    def test_identity_through_direct_mapping(self, resolver):
        assert resolver.map("/apps/x") == "/apps/x"

    def test_virtual_url(self, resolver):
        assert resolver.map("/content/site/index.html") == "/home"

    def test_no_resource_needed(self, resolver):
        assert resolver.map("/content/site/does/not/exist") == "/site/does/not/exist"

    def test_resolve_then_map_round_trip(self, resolver):
        resource = resolver.resolve("/site/news/article")
        assert resolver.map(resource.path) == "/site/news/article"


# =============================================================================
# get_resource()
# =============================================================================

class TestGetResource:
    """Tests for get_resource(path, base)."""

    def test_absolute(self, resolver):
        resource = resolver.get_resource("/apps/components/header")
        assert resource.resource_type == "apps/header"
        assert resource.metadata.resolution_path == "/apps/components/header"

    def test_absolute_missing(self, resolver):
        assert resolver.get_resource("/apps/missing") is None

    def test_no_mappings_applied(self, resolver):
        assert resolver.get_resource("/site/index.html") is None

    def test_no_path_shortening(self, resolver):
        assert resolver.get_resource("/a/b/c.ext") is None

    def test_normalizes_dot_segments(self, resolver):
        resource = resolver.get_resource("/content/./site/../../apps/x")
        assert resource.path == "/apps/x"

    def test_escaping_root_returns_none(self, resolver):
        assert resolver.get_resource("/apps/../../x") is None

    def test_relative_uses_search_path_order(self, resolver):
        assert resolver.get_resource("x").path == "/apps/x"
        assert resolver.get_resource("components/header").path == "/apps/components/header"

    def test_relative_falls_through_to_later_entry(self, resolver):
        assert resolver.get_resource("components/footer").path == "/libs/components/footer"

    def test_relative_not_found(self, resolver):
        assert resolver.get_resource("components/missing") is None

    def test_relative_to_base(self, resolver):
        base = resolver.get_resource("/libs/components")
        assert resolver.get_resource("header", base=base).path == "/libs/components/header"

    def test_relative_to_root_base(self, resolver):
        base = resolver.get_resource("/")
        assert resolver.get_resource("a/b", base=base).path == "/a/b"

    def test_absolute_ignores_base(self, resolver):
        base = resolver.get_resource("/libs/components")
        assert resolver.get_resource("/apps/x", base=base).path == "/apps/x"

    def test_search_path(self, resolver):
        assert resolver.get_search_path() == ("/apps/", "/libs/")


# =============================================================================
# list_children()
# =============================================================================

class TestListChildren:
    """Tests for list_children(parent)."""

    def test_listable_resource(self, resolver):
        parent = resolver.get_resource("/content/site")
        names = [child.name for child in resolver.list_children(parent)]
        assert names == ["index.html", "news"]

    def test_unreadable_children_skipped(self, resolver):
        parent = resolver.get_resource("/content")
        assert [child.path for child in resolver.list_children(parent)] == ["/content/site"]

    def test_non_listable_resource_re_resolved(self, resolver):
        children = list(resolver.list_children(NonExistingResource("/libs/components")))
        assert [child.path for child in children] == [
            "/libs/components/header",
            "/libs/components/footer",
        ]

    def test_non_listable_missing_resource_is_empty(self, resolver):
        children = resolver.list_children(NonExistingResource("/nothing/here"))
        assert next(children, None) is None

    def test_leaf_has_no_children(self, resolver):
        leaf = resolver.get_resource("/apps/x")
        assert list(resolver.list_children(leaf)) == []


# =============================================================================
# adapt_to() and lifecycle
# =============================================================================

class TestAdaptAndLifecycle:

    def test_adapt_to_session(self, resolver, session):
        assert resolver.adapt_to(MemorySession) is session

    def test_adapt_to_self(self, resolver):
        assert resolver.adapt_to(ResourceResolver) is resolver

    def test_adapt_to_unknown(self, resolver):
        assert resolver.adapt_to(int) is None

    def test_close_drops_session(self, factory, session):
        resolver = factory.get_resource_resolver(session)
        resolver.close()
        assert not resolver.is_live
        with pytest.raises(ResolverError):
            resolver.get_session()
        # the session itself stays usable
        assert session.is_live

    def test_context_manager(self, factory, session):
        with factory.get_resource_resolver(session) as resolver:
            assert resolver.get_session() is session
        assert not resolver.is_live


# =============================================================================
# Configuration snapshots
# =============================================================================

class TestReconfiguration:
    """Resolvers read the factory's snapshot per operation."""

    def test_existing_resolver_sees_new_configuration(self, factory, resolver):
        assert resolver.resolve("/site/index.html") is not None

        factory.reconfigure(ResolverConfig(mappings=["/-/"], search_path=["/libs"]))

        assert resolver.resolve("/site/index.html") is None
        assert resolver.get_resource("x").path == "/libs/x"
        assert resolver.map("/content/site/index.html") == "/content/site/index.html"

    def test_resolution_in_progress_keeps_its_snapshot(self, factory, session):
        """A reconfiguration during lookup does not affect the running resolution."""

        class ReconfiguringProvider:
            def __init__(self):
                self.calls = 0

            def get_resource(self, resolver, path):
                self.calls += 1
                if self.calls == 1:
                    factory.reconfigure(ResolverConfig(mappings=["/-/"]))
                return None

            def list_children(self, parent):
                return iter(())

        factory.register_provider("/content/site/news", ReconfiguringProvider())
        resolver = factory.get_resource_resolver(session)

        resource = resolver.resolve("/site/news/article.html")

        # resolved with the mapping table the call started with
        assert resource.path == "/content/site/news/article"
        assert resource.metadata.resolution_path == "/site/news/article"
        # later calls use the new table
        assert resolver.resolve("/site/news/article.html") is None
