"""Boundary predicates and sort specs for cursor pagination.

Queries are plain dicts in the search backend's query DSL, ready to pass as
the `query` and `sort` arguments of a search call.
"""

from typing_extensions import TypeAliasType

from search_dal.models.contexts import Cursor

Query = TypeAliasType("Query", dict[str, object])
Sort = TypeAliasType("Sort", list[dict[str, dict[str, str]]])


def match_all() -> Query:
    """Select every document."""
    return {"match_all": {}}


def greater_than(field: str, value: str) -> Query:
    """Exclusive lower bound on `field`."""
    return {"range": {field: {"gt": value}}}


def equal_to(field: str, value: str) -> Query:
    """Exact match on `field`."""
    return {"match": {field: value}}


def boundary_query(field: str, cursor: Cursor) -> Query:
    """Select documents strictly after `cursor` on a single sort field."""
    if cursor.primary is None:
        return match_all()
    return greater_than(field, cursor.primary)


def composite_boundary_query(field: str, secondary_field: str, cursor: Cursor) -> Query:
    """Select documents strictly after `cursor` under (field, secondary_field) order.

    A document qualifies if its primary value is greater than the cursor's,
    or if it ties on the primary value and its secondary value is greater.
    """
    if cursor.is_empty:
        return match_all()
    if cursor.secondary is None:
        return boundary_query(field, cursor)
    return {
        "bool": {
            "minimum_should_match": 1,
            "should": [
                greater_than(field, cursor.primary),
                {
                    "bool": {
                        "filter": [
                            equal_to(field, cursor.primary),
                            greater_than(secondary_field, cursor.secondary),
                        ]
                    }
                },
            ],
        }
    }


def ascending(*fields: str) -> Sort:
    """Sort spec ordering by each field ascending, in the given priority."""
    return [{field: {"order": "asc"}} for field in fields]
