"""Cursor value extraction from documents."""

from collections.abc import Mapping

from search_dal.errors import FieldExtractionError
from search_dal.models.datatypes import SOURCE_ID_FIELD, SOURCE_INDEX_FIELD, Document, JsonValue

KEYWORD_SUFFIX = ".keyword"

# Hit metadata fields live outside the source, under their provenance names.
METADATA_FIELDS = {"_id": SOURCE_ID_FIELD, "_index": SOURCE_INDEX_FIELD}


def strip_keyword_suffix(path: str) -> str:
    """Map a `.keyword` sub-field name to the source field it indexes."""
    if path.endswith(KEYWORD_SUFFIX):
        return path[: -len(KEYWORD_SUFFIX)]
    return path


class CursorField:
    """Reads a cursor value from a document by (possibly dotted) field path.

    The path is the one used in queries and sorts. A trailing `.keyword`
    names the backend's keyword sub-field, which is absent from the stored
    source, so reads resolve against the parent field instead.
    """

    __slots__ = ("_segments", "path")

    def __init__(self, path: str) -> None:
        self.path = path
        source_path = strip_keyword_suffix(path)
        if source_path in METADATA_FIELDS:
            self._segments: tuple[str, ...] = (METADATA_FIELDS[source_path],)
        else:
            self._segments = tuple(source_path.split("."))

    def lookup(self, document: Document) -> JsonValue:
        """Return the raw value at the field path.

        Raises FieldExtractionError if a segment is missing or the path
        passes through a value that is not a mapping. A present but null
        value is returned as None.
        """
        return _lookup(document, self._segments, self.path)

    def read(self, document: Document) -> str:
        """Return the value at the field path as a cursor string."""
        value = self.lookup(document)
        if value is None:
            msg = f"Cursor field '{self.path}' is null"
            raise FieldExtractionError(msg, path=self.path)
        if isinstance(value, (list, Mapping)):
            msg = f"Cursor field '{self.path}' is not a scalar"
            raise FieldExtractionError(msg, path=self.path)
        if isinstance(value, bool):
            return "true" if value else "false"
        return str(value)

    def __repr__(self) -> str:
        return f"CursorField({self.path!r})"


def _lookup(node: JsonValue, segments: tuple[str, ...], path: str) -> JsonValue:
    if not segments:
        return node
    head, rest = segments[0], segments[1:]
    if not isinstance(node, Mapping):
        msg = f"Cursor field '{path}' traverses a non-object at '{head}'"
        raise FieldExtractionError(msg, path=path)
    if head not in node:
        msg = f"Cursor field '{path}' not found (missing '{head}')"
        raise FieldExtractionError(msg, path=path)
    return _lookup(node[head], rest, path)
