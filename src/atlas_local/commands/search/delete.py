"""Search index delete command."""

import logging
from dataclasses import dataclass
from typing import Annotated, Literal, Protocol, Union

from pydantic import BaseModel, Field

from atlas_local.commands.search import CANCELED_PROMPT_ERROR, prompt_if_none
from atlas_local.dependencies import SearchIndexDeleter
from atlas_local.exceptions import MongoClientError, SearchIndexError
from atlas_local.interaction import (
    ConfirmationPrompt,
    ConfirmationPromptOptions,
    ConfirmationPromptResult,
    InputPrompt,
    SpinnerInteraction,
)

logger = logging.getLogger(__name__)


class DeleteSearchIndexInteraction(InputPrompt, ConfirmationPrompt, SpinnerInteraction, Protocol):
    """Interaction capabilities needed by DeleteSearchIndex."""


class DeleteSearchIndexDeleted(BaseModel):
    outcome: Literal["deleted"] = "deleted"
    index_name: str

    def __str__(self) -> str:
        return f"Index '{self.index_name}' deleted"


class DeleteSearchIndexCanceled(BaseModel):
    outcome: Literal["canceled"] = "canceled"
    index_name: str

    def __str__(self) -> str:
        return "Index not deleted"


class DeleteSearchIndexFailed(BaseModel):
    outcome: Literal["failed"] = "failed"
    error: str

    def __str__(self) -> str:
        return f"Index not deleted: {self.error}"


DeleteSearchIndexResult = Annotated[
    Union[DeleteSearchIndexDeleted, DeleteSearchIndexCanceled, DeleteSearchIndexFailed],
    Field(discriminator="outcome"),
]


@dataclass
class DeleteSearchIndex:
    """Delete a search index, after confirmation unless force is set."""

    mongodb_client: SearchIndexDeleter | MongoClientError
    interaction: DeleteSearchIndexInteraction
    database_name: str | None = None
    collection_name: str | None = None
    index_name: str | None = None
    force: bool = False

    async def execute(self) -> DeleteSearchIndexResult:
        values = []
        for value, message in (
            (self.database_name, "Database?"),
            (self.collection_name, "Collection?"),
            (self.index_name, "Search Index Name?"),
        ):
            answer = prompt_if_none(self.interaction, value, message)
            if answer is None:
                return DeleteSearchIndexFailed(error=CANCELED_PROMPT_ERROR)
            values.append(answer)
        database_name, collection_name, index_name = values

        if not self.force:
            answer = self.interaction.confirm(
                ConfirmationPromptOptions(
                    message=f"Are you sure you want to delete search index '{index_name}'?",
                    default=False,
                )
            )
            if answer is not ConfirmationPromptResult.YES:
                return DeleteSearchIndexCanceled(index_name=index_name)

        if isinstance(self.mongodb_client, MongoClientError):
            return DeleteSearchIndexFailed(error=str(self.mongodb_client))

        with self.interaction.start_spinner("Deleting search index..."):
            try:
                await self.mongodb_client.delete_search_index(
                    database_name, collection_name, index_name
                )
            except SearchIndexError as e:
                return DeleteSearchIndexFailed(error=f"failed to delete search index: {e}")

        logger.debug("search index %s.%s/%s deleted", database_name, collection_name, index_name)
        return DeleteSearchIndexDeleted(index_name=index_name)
