"""Model types shared by providers.

Contexts carry resume state, params carry configuration, and datatypes are
the items that flow out of a provider.
"""

from search_dal.models.contexts import Cursor
from search_dal.models.datatypes import (
    SOURCE_ID_FIELD,
    SOURCE_INDEX_FIELD,
    Document,
    JsonValue,
    PageResult,
)
from search_dal.models.params import DocumentParams

__all__ = [
    # Contexts (runtime state)
    "Cursor",
    # Params (configuration)
    "DocumentParams",
    # Data types
    "SOURCE_ID_FIELD",
    "SOURCE_INDEX_FIELD",
    "Document",
    "JsonValue",
    "PageResult",
]
