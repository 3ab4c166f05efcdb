"""Context types for data operations.

Contexts carry state needed to resume reading from a specific position.
They only track *where* to resume, not *how much* to read (that's in Params).
"""

from typing import Self

from pydantic import BaseModel, model_validator


class Cursor(BaseModel, frozen=True):
    """Resume point for search-index pagination.

    A cursor marks the last document returned: the value of its primary sort
    field and, in composite mode, the value of its secondary sort field.
    Values are kept as strings and handed to the backend as range bounds,
    leaving type coercion to the backend's field mapping.
    """

    primary: str | None = None
    """Primary sort-field value of the last returned document."""

    secondary: str | None = None
    """Secondary sort-field value, used to break ties on `primary`."""

    @model_validator(mode="after")
    def _secondary_requires_primary(self) -> Self:
        if self.secondary is not None and self.primary is None:
            msg = "secondary cursor value requires a primary cursor value"
            raise ValueError(msg)
        return self

    @classmethod
    def empty(cls) -> Self:
        """Cursor denoting the start of the stream."""
        return cls()

    @property
    def is_empty(self) -> bool:
        """Whether this cursor denotes the start of the stream."""
        return self.primary is None and self.secondary is None
