"""
Pytest configuration and fixtures for resolver tests.

Provides fixtures for:
- In-memory session over a small sample tree
- Resolver factory with rewrite mappings and virtual URLs
- Resolver bound to the sample session
- Fake query executor
"""
import sys
from pathlib import Path
from typing import Any, Optional, Sequence

import pytest

# Add project root to path before importing project modules
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from resource_resolver.core.memory import MemoryResourceProvider, MemorySession  # noqa: E402
from resource_resolver.core.query import QueryResult  # noqa: E402
from resource_resolver.services.config import ResolverConfig  # noqa: E402
from resource_resolver.services.factory import ResourceResolverFactory  # noqa: E402


SAMPLE_TREE = {
    "content": {
        "site": {
            "resourceType": "site/home",
            "index.html": {"resourceType": "site/page", "title": "Home"},
            "news": {
                "resourceType": "site/folder",
                "article": {"resourceType": "site/article", "title": "Article"},
            },
        },
        "private": {
            "secret": {"resourceType": "site/secret"},
        },
    },
    "apps": {
        "components": {
            "header": {"resourceType": "apps/header"},
        },
        "x": {"resourceType": "apps/x"},
    },
    "libs": {
        "components": {
            "header": {"resourceType": "libs/header"},
            "footer": {"resourceType": "libs/footer"},
        },
        "x": {"resourceType": "libs/x"},
    },
    "a": {
        "b": {"resourceType": "test/b"},
    },
}


class FakeRow:
    """Query row returning fixed values."""

    def __init__(self, values: Sequence[Any]):
        self._values = values

    def get_values(self) -> Sequence[Any]:
        return self._values


class FakeQueryExecutor:
    """Query executor returning a canned result or raising a canned error."""

    def __init__(self, result: Optional[QueryResult] = None, error: Optional[Exception] = None):
        self.result = result or QueryResult(column_names=[])
        self.error = error
        self.calls: list[tuple[Any, str, str]] = []

    def query(self, session: Any, query: str, language: str) -> QueryResult:
        self.calls.append((session, query, language))
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def session():
    """In-memory session over SAMPLE_TREE with /content/private unreadable."""
    return MemorySession.from_tree(SAMPLE_TREE, user_id="tester", denied=["/content/private"])


@pytest.fixture
def resolver_config():
    return ResolverConfig(
        mappings=["/content/site/:/site/", "/-/"],
        virtual_urls=["/home:/site/index.html"],
        search_path=["/apps", "/libs"],
    )


@pytest.fixture
def query_executor():
    return FakeQueryExecutor()


@pytest.fixture
def factory(resolver_config, query_executor):
    return ResourceResolverFactory(
        root_provider_factory=MemoryResourceProvider,
        config=resolver_config,
        query_executor=query_executor,
    )


@pytest.fixture
def resolver(factory, session):
    """Resolver bound to the sample session."""
    with factory.get_resource_resolver(session) as resolver:
        yield resolver
