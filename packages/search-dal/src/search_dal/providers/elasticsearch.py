"""Elasticsearch / OpenSearch provider using the async elasticsearch client."""

import asyncio
import logging
from collections.abc import AsyncIterator, Mapping
from typing import TYPE_CHECKING, ClassVar, Self

from pydantic import BaseModel, Field

from search_dal.errors import ConfigError, DalError, ErrorKind
from search_dal.fields import CursorField
from search_dal.models.contexts import Cursor
from search_dal.models.datatypes import (
    SOURCE_ID_FIELD,
    SOURCE_INDEX_FIELD,
    Document,
    PageResult,
)
from search_dal.models.params import DocumentParams
from search_dal.query import Query, Sort, ascending, boundary_query, composite_boundary_query
from search_dal.retry import PageFetcher, Sleep

if TYPE_CHECKING:
    from elasticsearch import AsyncElasticsearch

try:
    from elasticsearch import (
        ApiError,
        AsyncElasticsearch,
        ConnectionTimeout,
    )
    from elasticsearch import ConnectionError as ClientConnectionError
    from elasticsearch import TransportError as ClientTransportError
except ImportError as e:
    _msg = (
        "elasticsearch is required for Elasticsearch support. "
        "Install with: uv add 'search-dal[elasticsearch]'"
    )
    raise ImportError(_msg) from e

logger = logging.getLogger(__name__)

RETRYABLE_ERRORS: tuple[type[BaseException], ...] = (ClientConnectionError, ConnectionTimeout)
"""Network-level failures worth another attempt; API errors are not."""


class ElasticCredentials(BaseModel, frozen=True):
    """Credentials for an Elasticsearch or OpenSearch cluster."""

    hosts: list[str] = Field(default_factory=lambda: ["http://localhost:9200"])
    """Node URLs (e.g., 'http://localhost:9200')."""

    username: str | None = None
    password: str | None = None

    api_key: str | None = None
    """API key, used instead of basic auth when set."""

    request_timeout: float = 30.0
    """Per-request timeout in seconds, enforced by the client."""


class ElasticParams(DocumentParams, frozen=True):
    """Parameters for Elasticsearch pagination.

    Inherits `index`, `cursor_field`, `secondary_cursor_field` and `page_size`
    from DocumentParams.
    """

    max_connection_attempts: int = 3
    """Attempts per search before giving up."""

    connection_retry_backoff: int = 10_000
    """Wait between failed attempts, in milliseconds."""


class ElasticConnection:
    """A cluster client together with its retry budget."""

    __slots__: ClassVar[tuple[str, str, str]] = (
        "client",
        "connection_retry_backoff",
        "max_connection_attempts",
    )

    client: "AsyncElasticsearch"
    max_connection_attempts: int
    connection_retry_backoff: int

    def __init__(
        self,
        client: "AsyncElasticsearch",
        max_connection_attempts: int = 3,
        connection_retry_backoff: int = 10_000,
    ) -> None:
        self.client = client
        self.max_connection_attempts = max_connection_attempts
        self.connection_retry_backoff = connection_retry_backoff

    async def close(self) -> None:
        """Close the underlying client."""
        await self.client.close()


class ElasticProvider:
    """Cursor-paginated reads from Elasticsearch indices.

    Implements Provider[ElasticCredentials, ElasticParams] and
    DataInput[Document, Cursor].

    Pages are ordered ascending by `cursor_field` (and `secondary_cursor_field`
    in composite mode) and bounded by a strict greater-than predicate on the
    cursor, so a returned document is never returned again by the next page.
    With a single non-unique cursor field, documents tied on the cursor value
    may be duplicated or skipped across page boundaries; configure a
    secondary cursor field and use composite mode to avoid that.
    """

    __slots__: ClassVar[tuple[str, ...]] = (
        "_connection",
        "_cursor_field",
        "_fetcher",
        "_page_size",
        "_params",
        "_secondary_cursor_field",
    )

    _connection: ElasticConnection
    _params: ElasticParams
    _page_size: int

    def __init__(
        self,
        connection: ElasticConnection,
        params: ElasticParams,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._connection = connection
        self._params = params
        self._page_size = params.page_size
        self._cursor_field = CursorField(params.cursor_field)
        self._secondary_cursor_field = (
            CursorField(params.secondary_cursor_field)
            if params.secondary_cursor_field
            else None
        )
        self._fetcher: PageFetcher[Mapping[str, object]] = PageFetcher(
            max_attempts=connection.max_connection_attempts,
            backoff_ms=connection.connection_retry_backoff,
            retry_on=RETRYABLE_ERRORS,
            sleep=sleep,
        )

    @classmethod
    async def connect(cls, credentials: ElasticCredentials, params: ElasticParams) -> Self:
        """Create the cluster client and verify connection."""
        basic_auth = (
            (credentials.username, credentials.password or "")
            if credentials.username
            else None
        )
        try:
            # Client-side retries are disabled; PageFetcher owns the retry budget.
            client = AsyncElasticsearch(
                hosts=credentials.hosts,
                basic_auth=basic_auth,
                api_key=credentials.api_key,
                request_timeout=credentials.request_timeout,
                max_retries=0,
                retry_on_timeout=False,
            )
        except Exception as e:
            msg = f"Failed to configure Elasticsearch client: {e}"
            raise DalError(msg, kind=ErrorKind.CONNECTION, source=e) from e

        try:
            _ = await client.info()
        except Exception as e:
            await client.close()
            msg = f"Failed to connect to Elasticsearch: {e}"
            raise DalError(msg, kind=ErrorKind.CONNECTION, source=e) from e

        connection = ElasticConnection(
            client,
            max_connection_attempts=params.max_connection_attempts,
            connection_retry_backoff=params.connection_retry_backoff,
        )
        return cls(connection, params)

    async def disconnect(self) -> None:
        """Close the cluster client."""
        await self._connection.close()

    @property
    def page_size(self) -> int:
        """Maximum number of documents requested per page."""
        return self._page_size

    @page_size.setter
    def page_size(self, value: int) -> None:
        # Fetches read the page size once on entry, so this never alters an
        # in-flight request.
        _check_page_size(value)
        self._page_size = value

    async def fetch_page(self, index: str, cursor: Cursor) -> PageResult:
        """Fetch the page of documents strictly after `cursor.primary`.

        Uses only the primary cursor field; any secondary cursor value is
        ignored.
        """
        page_size = _check_page_size(self._page_size)
        field = self._cursor_field.path
        documents = await self._search(
            index,
            query=boundary_query(field, cursor),
            sort=ascending(field),
            size=page_size,
        )
        if not documents:
            return PageResult(index=index, next_cursor=Cursor.empty())

        next_cursor = Cursor(primary=self._cursor_field.read(documents[-1]))
        return PageResult(index=index, documents=documents, next_cursor=next_cursor)

    async def fetch_page_with_secondary_sort(self, index: str, cursor: Cursor) -> PageResult:
        """Fetch the page of documents strictly after the (primary, secondary) cursor.

        Documents are ordered by the primary then the secondary cursor field,
        so documents tied on the primary value are resumed exactly.
        """
        secondary_field = self._secondary_cursor_field
        if secondary_field is None:
            msg = "Secondary sort requires a secondary cursor field"
            raise ConfigError(msg)
        page_size = _check_page_size(self._page_size)
        field = self._cursor_field.path
        documents = await self._search(
            index,
            query=composite_boundary_query(field, secondary_field.path, cursor),
            sort=ascending(field, secondary_field.path),
            size=page_size,
        )
        if not documents:
            return PageResult(index=index, next_cursor=Cursor.empty())

        last = documents[-1]
        next_cursor = Cursor(
            primary=self._cursor_field.read(last),
            secondary=secondary_field.read(last),
        )
        return PageResult(index=index, documents=documents, next_cursor=next_cursor)

    async def read(self, ctx: Cursor) -> AsyncIterator[tuple[Document, Cursor]]:
        """Read every document after `ctx` from the configured index.

        Yields tuples of (document, cursor) where cursor can be used to resume
        reading from the next document if the stream is interrupted. Uses
        composite mode when a secondary cursor field is configured.
        """
        index = self._params.index
        if index is None:
            msg = "Streaming reads require an index in params"
            raise ConfigError(msg)

        fetch = (
            self.fetch_page
            if self._secondary_cursor_field is None
            else self.fetch_page_with_secondary_sort
        )
        cursor = ctx
        while True:
            page = await fetch(index, cursor)
            if page.is_empty:
                return
            for document in page.documents:
                yield (document, self._cursor_for(document))
            cursor = page.next_cursor

    async def list_indices(self, prefix: str = "") -> list[str]:
        """List index names starting with `prefix`, sorted.

        Returns an empty list if the listing call fails.
        """
        try:
            response = await self._connection.client.cat.indices()
        except (ApiError, ClientTransportError) as e:
            logger.error("Failed to list indices: %s", e)
            return []

        names: list[str] = []
        for line in str(response.body).splitlines():
            columns = line.split()
            if len(columns) < 3:
                logger.debug("Skipping unparseable index listing line: %r", line)
                continue
            if columns[2].startswith(prefix):
                names.append(columns[2])
        return sorted(names)

    async def refresh_index(self, index: str) -> None:
        """Make recently written documents in `index` visible to searches."""
        try:
            _ = await self._connection.client.indices.refresh(index=index)
        except (ApiError, ClientTransportError) as e:
            logger.error("Failed to refresh index %s: %s", index, e)
            msg = f"Failed to refresh index '{index}': {e}"
            raise DalError(msg, source=e) from e

    async def _search(self, index: str, query: Query, sort: Sort, size: int) -> list[Document]:
        client = self._connection.client
        logger.debug("Searching %s: query=%s size=%d", index, query, size)
        try:
            response = await self._fetcher.execute(
                lambda: client.search(index=index, query=query, sort=sort, size=size)
            )
        except ApiError as e:
            msg = f"Search on index '{index}' failed: {e}"
            raise DalError(msg, source=e) from e
        return _extract_documents(response)

    def _cursor_for(self, document: Document) -> Cursor:
        secondary = (
            self._secondary_cursor_field.read(document)
            if self._secondary_cursor_field is not None
            else None
        )
        return Cursor(primary=self._cursor_field.read(document), secondary=secondary)


def _check_page_size(page_size: int) -> int:
    if page_size <= 0:
        msg = f"Page size must be > 0, got {page_size}"
        raise ConfigError(msg)
    return page_size


def _extract_documents(response: Mapping[str, object]) -> list[Document]:
    """Turn search hits into documents tagged with their id and origin index."""
    hits = response["hits"]["hits"]  # pyright: ignore[reportIndexIssue]
    documents: list[Document] = []
    for hit in hits:
        document: Document = dict(hit.get("_source") or {})
        document[SOURCE_ID_FIELD] = hit["_id"]
        document[SOURCE_INDEX_FIELD] = hit["_index"]
        documents.append(document)
    return documents


Provider = ElasticProvider
