"""Parameter types for provider configuration.

Params define how providers operate (fields, page sizes, retry budget),
while contexts carry runtime state (cursors).
"""

from pydantic import BaseModel, Field


class DocumentParams(BaseModel, frozen=True):
    """Common parameters for document store operations."""

    index: str | None = None
    """Default index used by streaming reads."""

    cursor_field: str = "_id"
    """Field used as the primary pagination cursor (dotted for nested fields)."""

    secondary_cursor_field: str | None = None
    """Field used to break ties when `cursor_field` values are not unique."""

    page_size: int = Field(default=5000)
    """Maximum number of documents returned per page."""
