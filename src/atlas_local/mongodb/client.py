"""
Search index client on top of pymongo's async API.

SearchIndexClient implements every search index capability for one local
deployment. Driver errors are converted to SearchIndexError carrying the
server's own message where there is one.
"""

import logging
from typing import Any

from pymongo import AsyncMongoClient
from pymongo.errors import OperationFailure, PyMongoError
from pymongo.operations import SearchIndexModel

from atlas_local.dependencies.search import CreateSearchIndexModel
from atlas_local.exceptions import SearchIndexError
from atlas_local.models import SearchIndex, SearchIndexStatus, SearchIndexType

logger = logging.getLogger(__name__)

# Databases that never hold user search indexes
SYSTEM_DATABASES = frozenset({"admin", "config", "local"})


def to_search_index_error(error: PyMongoError) -> SearchIndexError:
    """Reduce a driver error to the server's error message."""
    if isinstance(error, OperationFailure) and error.details:
        message = error.details.get("errmsg")
        if message:
            return SearchIndexError(message)
    return SearchIndexError(str(error))


def to_search_index(database: str, collection: str, document: dict[str, Any]) -> SearchIndex:
    """Convert a $listSearchIndexes document."""
    return SearchIndex(
        index_id=str(document["id"]),
        name=document["name"],
        database=database,
        collection_name=collection,
        status=SearchIndexStatus(document["status"]),
        index_type=document.get("type"),
    )


class SearchIndexClient:
    """
    Search index operations for one deployment.

    Attributes:
        client: Connected pymongo AsyncMongoClient.
    """

    def __init__(self, client: AsyncMongoClient):
        self.client = client

    async def close(self) -> None:
        await self.client.close()

    async def _list_documents(
        self, database_name: str, collection_name: str, index_name: str | None = None
    ) -> list[dict[str, Any]]:
        collection = self.client[database_name][collection_name]
        cursor = await collection.list_search_indexes(index_name)
        documents = await cursor.to_list()
        logger.debug(
            "search indexes of %s.%s: %s", database_name, collection_name, documents
        )
        return documents

    async def create_search_index(self, model: CreateSearchIndexModel) -> str:
        """
        Create a search index and return its id.

        Raises:
            SearchIndexError: If the server rejects the index.
        """
        index_type = model.index_type or SearchIndexType.SEARCH
        collection = self.client[model.database_name][model.collection_name]
        try:
            name = await collection.create_search_index(
                SearchIndexModel(
                    definition=model.definition,
                    name=model.name,
                    type=str(index_type),
                )
            )
            documents = await self._list_documents(model.database_name, model.collection_name, name)
        except PyMongoError as e:
            raise to_search_index_error(e) from e

        # The server reports the id only through $listSearchIndexes
        if documents and "id" in documents[0]:
            return str(documents[0]["id"])
        return name

    async def get_search_index_status(
        self, database_name: str, collection_name: str, index_name: str
    ) -> SearchIndexStatus | None:
        try:
            documents = await self._list_documents(database_name, collection_name, index_name)
        except PyMongoError as e:
            raise to_search_index_error(e) from e

        for document in documents:
            if document.get("name") == index_name:
                return SearchIndexStatus(document["status"])
        return None

    async def list_search_indexes(
        self, database_name: str, collection_name: str
    ) -> list[SearchIndex]:
        try:
            documents = await self._list_documents(database_name, collection_name)
        except PyMongoError as e:
            raise to_search_index_error(e) from e
        return [to_search_index(database_name, collection_name, doc) for doc in documents]

    async def delete_search_index(
        self, database_name: str, collection_name: str, index_name: str
    ) -> None:
        collection = self.client[database_name][collection_name]
        try:
            await collection.drop_search_index(index_name)
        except PyMongoError as e:
            raise to_search_index_error(e) from e

    async def describe_search_index(self, index_id: str) -> SearchIndex | None:
        """
        Find a search index by id.

        Search indexes are scoped to collections, so every collection of
        every user database is scanned.
        """
        try:
            database_names = await self.client.list_database_names()
        except PyMongoError as e:
            raise to_search_index_error(e) from e

        for database_name in database_names:
            if database_name in SYSTEM_DATABASES:
                continue
            try:
                collection_names = await self.client[database_name].list_collection_names()
            except PyMongoError as e:
                raise to_search_index_error(e) from e

            for collection_name in collection_names:
                try:
                    documents = await self._list_documents(database_name, collection_name)
                except OperationFailure as e:
                    # Views and system collections cannot hold search indexes
                    logger.debug("skipping %s.%s: %s", database_name, collection_name, e)
                    continue
                except PyMongoError as e:
                    raise to_search_index_error(e) from e

                for document in documents:
                    if str(document.get("id")) == index_id:
                        return to_search_index(database_name, collection_name, document)
        return None
