"""
Search index capabilities.

SearchIndexClient in atlas_local.mongodb.client implements all of them on top
of pymongo.
"""

from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from atlas_local.models import SearchIndex, SearchIndexStatus, SearchIndexType

DEFAULT_SEARCH_INDEX_DEFINITION: dict[str, Any] = {
    "analyzer": "lucene.standard",
    "searchAnalyzer": "lucene.standard",
    "mappings": {"dynamic": True},
}


@dataclass
class CreateSearchIndexModel:
    """Everything needed to create one search index."""

    database_name: str
    collection_name: str
    definition: dict[str, Any] = field(default_factory=dict)
    name: str | None = None
    index_type: SearchIndexType | str | None = None


@runtime_checkable
class SearchIndexCreator(Protocol):
    async def create_search_index(self, model: CreateSearchIndexModel) -> str:
        """Create the index and return its id."""
        ...


@runtime_checkable
class SearchIndexStatusGetter(Protocol):
    async def get_search_index_status(
        self, database_name: str, collection_name: str, index_name: str
    ) -> SearchIndexStatus | None:
        """Return the index status, or None if no index has that name."""
        ...


@runtime_checkable
class SearchIndexLister(Protocol):
    async def list_search_indexes(
        self, database_name: str, collection_name: str
    ) -> list[SearchIndex]: ...


@runtime_checkable
class SearchIndexDeleter(Protocol):
    async def delete_search_index(
        self, database_name: str, collection_name: str, index_name: str
    ) -> None: ...


@runtime_checkable
class SearchIndexDescriber(Protocol):
    async def describe_search_index(self, index_id: str) -> SearchIndex | None:
        """Find an index by id across every database, None if absent."""
        ...
