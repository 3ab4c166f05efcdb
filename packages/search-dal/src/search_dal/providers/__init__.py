"""Provider implementations for external services.

Each provider module exports a `Provider` class alias for the main provider class,
along with its credentials and params types.

Available providers (require optional dependencies):
- elasticsearch: Elasticsearch / OpenSearch via the async elasticsearch client
"""

from search_dal.providers import elasticsearch

__all__ = [
    "elasticsearch",
]
