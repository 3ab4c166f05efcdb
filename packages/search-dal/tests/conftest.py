"""
Shared test fixtures for the search-dal test suite.

Provides an in-memory stand-in for the async Elasticsearch client that
evaluates the subset of the query DSL the provider emits, plus a sleep
that records waits instead of blocking.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import pytest
from elasticsearch import ConnectionError as ClientConnectionError

from search_dal.providers.elasticsearch import ElasticConnection, ElasticParams, ElasticProvider

_MISSING = object()


def _resolve(hit: dict[str, Any], path: str) -> Any:
    """Read a field the way the backend would for queries and sorts."""
    if path == "_id":
        return hit["_id"]
    if path.endswith(".keyword"):
        path = path[: -len(".keyword")]
    node: Any = hit["_source"]
    for segment in path.split("."):
        if not isinstance(node, dict) or segment not in node:
            return _MISSING
        node = node[segment]
    return node


def _coerce(value: Any, bound: str) -> tuple[Any, Any]:
    """Coerce a string bound to the document value's type, like a field mapping does."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value), float(bound)
    return str(value), bound


def _matches(hit: dict[str, Any], query: dict[str, Any]) -> bool:
    ((kind, body),) = query.items()
    if kind == "match_all":
        return True
    if kind == "range":
        ((path, bounds),) = body.items()
        value = _resolve(hit, path)
        if value is _MISSING:
            return False
        left, right = _coerce(value, bounds["gt"])
        return left > right
    if kind == "match":
        ((path, expected),) = body.items()
        value = _resolve(hit, path)
        if value is _MISSING:
            return False
        left, right = _coerce(value, expected)
        return left == right
    if kind == "bool":
        filters = body.get("filter", [])
        should = body.get("should", [])
        if not all(_matches(hit, q) for q in filters):
            return False
        minimum = body.get("minimum_should_match", 0)
        return sum(_matches(hit, q) for q in should) >= minimum
    raise AssertionError(f"unsupported query: {query}")


def _sort_key(hit: dict[str, Any], sort: list[dict[str, dict[str, str]]]) -> tuple[Any, ...]:
    key = []
    for spec in sort:
        ((path, options),) = spec.items()
        assert options == {"order": "asc"}
        value = _resolve(hit, path)
        key.append((value is _MISSING, value if value is not _MISSING else None))
    return tuple(key)


@dataclass
class TextResponse:
    body: str


class FakeCat:
    def __init__(self, client: FakeElasticsearch) -> None:
        self._client = client

    async def indices(self) -> TextResponse:
        if self._client.admin_error is not None:
            raise self._client.admin_error
        lines = [
            f"green open {name} uuid-{i} 1 1 {len(docs)} 0 1kb 1kb"
            for i, (name, docs) in enumerate(self._client.indices_data.items())
        ]
        return TextResponse("\n".join([*lines, *self._client.extra_cat_lines]) + "\n")


class FakeIndices:
    def __init__(self, client: FakeElasticsearch) -> None:
        self._client = client

    async def refresh(self, index: str) -> dict[str, Any]:
        if self._client.admin_error is not None:
            raise self._client.admin_error
        self._client.refreshed.append(index)
        return {"_shards": {"total": 1, "successful": 1, "failed": 0}}


@dataclass
class FakeElasticsearch:
    """In-memory search backend with failure injection."""

    indices_data: dict[str, list[dict[str, Any]]] = field(default_factory=dict)
    failures: list[BaseException] = field(default_factory=list)
    admin_error: BaseException | None = None
    extra_cat_lines: list[str] = field(default_factory=list)
    searches: list[dict[str, Any]] = field(default_factory=list)
    refreshed: list[str] = field(default_factory=list)
    closed: bool = False

    def __post_init__(self) -> None:
        self.cat = FakeCat(self)
        self.indices = FakeIndices(self)

    def add(self, index: str, *sources: dict[str, Any]) -> None:
        docs = self.indices_data.setdefault(index, [])
        for source in sources:
            docs.append({"_id": f"doc-{len(docs) + 1}", "_index": index, "_source": source})

    def fail_next(self, times: int, message: str = "connection refused") -> None:
        self.failures.extend(ClientConnectionError(message) for _ in range(times))

    async def search(
        self,
        index: str,
        query: dict[str, Any],
        sort: list[dict[str, dict[str, str]]],
        size: int,
    ) -> dict[str, Any]:
        self.searches.append({"index": index, "query": query, "sort": sort, "size": size})
        if self.failures:
            raise self.failures.pop(0)
        hits = [h for h in self.indices_data.get(index, []) if _matches(h, query)]
        hits.sort(key=lambda h: _sort_key(h, sort))
        selected = hits[:size]
        return {
            "took": 1,
            "hits": {
                "total": {"value": len(hits), "relation": "eq"},
                "hits": [
                    {"_index": h["_index"], "_id": h["_id"], "_source": dict(h["_source"])}
                    for h in selected
                ],
            },
        }

    async def close(self) -> None:
        self.closed = True


class RecordingSleep:
    """Async sleep replacement that records requested waits."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(float(seconds))


@pytest.fixture
def client() -> FakeElasticsearch:
    return FakeElasticsearch()


@pytest.fixture
def sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def make_provider(
    client: FakeElasticsearch, sleep: RecordingSleep
) -> Callable[..., ElasticProvider]:
    """Build a provider over the fake client; keyword args go to ElasticParams."""

    def factory(
        max_connection_attempts: int = 3,
        connection_retry_backoff: int = 250,
        **params: Any,
    ) -> ElasticProvider:
        connection = ElasticConnection(
            client,  # type: ignore[arg-type]
            max_connection_attempts=max_connection_attempts,
            connection_retry_backoff=connection_retry_backoff,
        )
        return ElasticProvider(connection, ElasticParams(**params), sleep=sleep)

    return factory
