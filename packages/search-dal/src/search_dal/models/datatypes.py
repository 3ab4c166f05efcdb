"""Data types for the DAL.

These types represent the data items that flow through providers:
- `Document` for JSON documents read from a search index
- `PageResult` for one bounded page of documents and its resume cursor
"""

from pydantic import BaseModel, Field
from typing_extensions import TypeAliasType

from search_dal.models.contexts import Cursor

# JSON-compatible value type
JsonValue = TypeAliasType(
    "JsonValue", str | int | float | bool | None | list["JsonValue"] | dict[str, "JsonValue"]
)

# A document's materialized source plus injected provenance fields.
Document = TypeAliasType("Document", dict[str, JsonValue])

SOURCE_ID_FIELD = "source-id"
"""Provenance field holding the hit identifier."""

SOURCE_INDEX_FIELD = "source-index"
"""Provenance field holding the index the hit came from."""


class PageResult(BaseModel, frozen=True):
    """One page of documents read from an index."""

    index: str
    """Index the page was read from."""

    documents: list[Document] = Field(default_factory=list)
    """Documents in backend sort order."""

    next_cursor: Cursor = Field(default_factory=Cursor)
    """Cursor to pass to the next fetch; empty when `documents` is empty."""

    @property
    def is_empty(self) -> bool:
        """Whether the page holds no documents."""
        return not self.documents
