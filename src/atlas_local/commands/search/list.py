"""Search index list command."""

from dataclasses import dataclass
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

from atlas_local.commands.search import CANCELED_PROMPT_ERROR, SEARCH_INDEXES_TABLE, prompt_if_none
from atlas_local.dependencies import SearchIndexLister
from atlas_local.exceptions import MongoClientError, SearchIndexError
from atlas_local.interaction import InputPrompt
from atlas_local.models import SearchIndex


class ListSearchIndexesSuccess(BaseModel):
    outcome: Literal["success"] = "success"
    indexes: list[SearchIndex]

    def __str__(self) -> str:
        return SEARCH_INDEXES_TABLE.render(self.indexes)


class ListSearchIndexesFailed(BaseModel):
    outcome: Literal["failed"] = "failed"
    error: str

    def __str__(self) -> str:
        return f"Listing indexes failed: {self.error}"


ListSearchIndexesResult = Annotated[
    Union[ListSearchIndexesSuccess, ListSearchIndexesFailed], Field(discriminator="outcome")
]


@dataclass
class ListSearchIndexes:
    """List the search indexes of one collection."""

    mongodb_client: SearchIndexLister | MongoClientError
    interaction: InputPrompt
    database_name: str | None = None
    collection_name: str | None = None

    async def execute(self) -> ListSearchIndexesResult:
        database_name = prompt_if_none(self.interaction, self.database_name, "Database?")
        if database_name is None:
            return ListSearchIndexesFailed(error=CANCELED_PROMPT_ERROR)
        collection_name = prompt_if_none(self.interaction, self.collection_name, "Collection?")
        if collection_name is None:
            return ListSearchIndexesFailed(error=CANCELED_PROMPT_ERROR)

        if isinstance(self.mongodb_client, MongoClientError):
            return ListSearchIndexesFailed(error=str(self.mongodb_client))

        try:
            indexes = await self.mongodb_client.list_search_indexes(database_name, collection_name)
        except SearchIndexError as e:
            return ListSearchIndexesFailed(error=f"failed to list search indexes: {e}")
        return ListSearchIndexesSuccess(indexes=indexes)
