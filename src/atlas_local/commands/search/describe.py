"""Search index describe command."""

from dataclasses import dataclass
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

from atlas_local.commands.search import CANCELED_PROMPT_ERROR, SEARCH_INDEXES_TABLE, prompt_if_none
from atlas_local.dependencies import SearchIndexDescriber
from atlas_local.exceptions import MongoClientError, SearchIndexError
from atlas_local.interaction import InputPrompt
from atlas_local.models import SearchIndex


class DescribeSearchIndexSuccess(BaseModel):
    outcome: Literal["success"] = "success"
    index: SearchIndex

    def __str__(self) -> str:
        return SEARCH_INDEXES_TABLE.render([self.index])


class DescribeSearchIndexFailed(BaseModel):
    outcome: Literal["failed"] = "failed"
    error: str

    def __str__(self) -> str:
        return f"Describing index failed: {self.error}"


DescribeSearchIndexResult = Annotated[
    Union[DescribeSearchIndexSuccess, DescribeSearchIndexFailed], Field(discriminator="outcome")
]


@dataclass
class DescribeSearchIndex:
    """Show one search index, looked up by id."""

    mongodb_client: SearchIndexDescriber | MongoClientError
    interaction: InputPrompt
    index_id: str | None = None

    async def execute(self) -> DescribeSearchIndexResult:
        index_id = prompt_if_none(self.interaction, self.index_id, "Search Index ID?")
        if index_id is None:
            return DescribeSearchIndexFailed(error=CANCELED_PROMPT_ERROR)

        if isinstance(self.mongodb_client, MongoClientError):
            return DescribeSearchIndexFailed(error=str(self.mongodb_client))

        try:
            index = await self.mongodb_client.describe_search_index(index_id)
        except SearchIndexError as e:
            return DescribeSearchIndexFailed(error=f"failed to describe search index: {e}")

        if index is None:
            return DescribeSearchIndexFailed(error=f"search index with ID '{index_id}' not found")
        return DescribeSearchIndexSuccess(index=index)
