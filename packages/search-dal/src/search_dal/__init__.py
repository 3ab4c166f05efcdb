"""Cursor-paginated extraction from search-index stores."""

from search_dal.errors import (
    ConfigError,
    DalError,
    ErrorKind,
    FieldExtractionError,
    TransportError,
)
from search_dal.fields import CursorField
from search_dal.models import Cursor, Document, DocumentParams, PageResult
from search_dal.protocols import DataInput, Provider

__all__ = [
    "ConfigError",
    "Cursor",
    "CursorField",
    "DalError",
    "DataInput",
    "Document",
    "DocumentParams",
    "ErrorKind",
    "FieldExtractionError",
    "PageResult",
    "Provider",
    "TransportError",
]
