"""Search index create command, with an optional watch loop."""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Annotated, Literal, Protocol, Union

from pydantic import BaseModel, Field, ValidationError

from atlas_local.commands.search import CANCELED_PROMPT_ERROR, prompt_if_none
from atlas_local.commands.search.file_definition import SearchIndexCreateRequest
from atlas_local.config import SEARCH_INDEX_WATCH_INTERVAL
from atlas_local.dependencies import (
    CreateSearchIndexModel,
    FileReader,
    LocalFileReader,
    SearchIndexCreator,
    SearchIndexStatusGetter,
)
from atlas_local.dependencies.search import DEFAULT_SEARCH_INDEX_DEFINITION
from atlas_local.exceptions import MongoClientError, SearchIndexError
from atlas_local.interaction import InputPrompt, SpinnerInteraction
from atlas_local.models import SearchIndexStatus, SearchIndexType

logger = logging.getLogger(__name__)

WATCH_ERROR = "failed to get search index status while watching the search index"


class CreateSearchIndexManagement(SearchIndexCreator, SearchIndexStatusGetter, Protocol):
    """Search index capabilities needed by CreateSearchIndex."""


class CreateSearchIndexInteraction(InputPrompt, SpinnerInteraction, Protocol):
    """Interaction capabilities needed by CreateSearchIndex."""


@dataclass
class IndexDefinitionFlags:
    """Index given field by field; missing fields are prompted for."""

    index_name: str | None = None
    database_name: str | None = None
    collection_name: str | None = None


@dataclass
class IndexDefinitionFile:
    """Index given as a JSON definition file."""

    path: str


class CreateSearchIndexCreated(BaseModel):
    outcome: Literal["created"] = "created"
    search_index_id: str

    def __str__(self) -> str:
        return f"Search index created with ID: {self.search_index_id}"


class CreateSearchIndexFailed(BaseModel):
    outcome: Literal["failed"] = "failed"
    error: str

    def __str__(self) -> str:
        return f"Creating index failed: {self.error}"


CreateSearchIndexResult = Annotated[
    Union[CreateSearchIndexCreated, CreateSearchIndexFailed], Field(discriminator="outcome")
]


@dataclass
class CreateSearchIndex:
    """
    Create a search index.

    With watch enabled, the index status is polled every watch_interval
    seconds until it is ready. Pending, building and stale indexes are
    polled again without limit; any other status ends the loop with a
    failed result.
    """

    definition_source: IndexDefinitionFlags | IndexDefinitionFile
    mongodb_client: CreateSearchIndexManagement | MongoClientError
    interaction: CreateSearchIndexInteraction
    file_reader: FileReader = field(default_factory=LocalFileReader)
    watch: bool = False
    watch_interval: float = SEARCH_INDEX_WATCH_INTERVAL

    async def execute(self) -> CreateSearchIndexResult:
        if isinstance(self.definition_source, IndexDefinitionFile):
            model = await self._model_from_file(self.definition_source)
        else:
            model = self._model_from_flags(self.definition_source)
        if isinstance(model, CreateSearchIndexFailed):
            return model

        if isinstance(self.mongodb_client, MongoClientError):
            return CreateSearchIndexFailed(error=str(self.mongodb_client))
        client = self.mongodb_client

        try:
            search_index_id = await client.create_search_index(model)
        except SearchIndexError as e:
            return CreateSearchIndexFailed(error=f"failed to create search index: {e}")
        logger.debug("search index %s created", search_index_id)

        if self.watch:
            with self.interaction.start_spinner("Building search index..."):
                failed = await self._watch(client, model)
            if failed is not None:
                return failed

        return CreateSearchIndexCreated(search_index_id=search_index_id)

    async def _watch(
        self, client: SearchIndexStatusGetter, model: CreateSearchIndexModel
    ) -> CreateSearchIndexFailed | None:
        polls = 0
        while True:
            try:
                status = await client.get_search_index_status(
                    model.database_name, model.collection_name, model.name or ""
                )
            except SearchIndexError as e:
                return CreateSearchIndexFailed(error=f"{WATCH_ERROR}: {e}")
            polls += 1
            logger.debug("search index status after %d polls: %s", polls, status)

            if status is None:
                return CreateSearchIndexFailed(
                    error=f"{WATCH_ERROR}, the search index does not exist"
                )
            if status is SearchIndexStatus.READY:
                return None
            if not status.is_pending:
                return CreateSearchIndexFailed(
                    error=f"{WATCH_ERROR}, the search index is not ready: {status}"
                )
            await asyncio.sleep(self.watch_interval)

    def _model_from_flags(
        self, flags: IndexDefinitionFlags
    ) -> CreateSearchIndexModel | CreateSearchIndexFailed:
        values = []
        for value, message in (
            (flags.index_name, "Search Index Name?"),
            (flags.database_name, "Database?"),
            (flags.collection_name, "Collection?"),
        ):
            answer = prompt_if_none(self.interaction, value, message)
            if answer is None:
                return CreateSearchIndexFailed(error=CANCELED_PROMPT_ERROR)
            values.append(answer)

        index_name, database_name, collection_name = values
        return CreateSearchIndexModel(
            database_name=database_name,
            collection_name=collection_name,
            definition=dict(DEFAULT_SEARCH_INDEX_DEFINITION),
            name=index_name,
            index_type=SearchIndexType.SEARCH,
        )

    async def _model_from_file(
        self, source: IndexDefinitionFile
    ) -> CreateSearchIndexModel | CreateSearchIndexFailed:
        try:
            content = await self.file_reader.read_to_string(source.path)
        except (OSError, UnicodeDecodeError) as e:
            logger.debug("reading %s failed: %s", source.path, e)
            return CreateSearchIndexFailed(error=f"failed to read file at path: {source.path}")

        try:
            request = SearchIndexCreateRequest.model_validate_json(content)
        except ValidationError as e:
            return CreateSearchIndexFailed(
                error=f"failed to parse file as search index create request: {e}"
            )

        return CreateSearchIndexModel(
            database_name=request.database,
            collection_name=request.collection_name,
            definition=request.definition or {},
            name=request.name,
            index_type=request.index_type,
        )
