"""
Search index commands.

Each command receives either a search index client or the MongoClientError
explaining why none could be created; in the latter case the command
collects its inputs and then returns a failed result.
"""

from atlas_local.interaction import InputPrompt, InputPromptOptions
from atlas_local.models import SearchIndex, SearchIndexType
from atlas_local.table import Table

CANCELED_PROMPT_ERROR = "user canceled the prompt"

SEARCH_INDEXES_TABLE = (
    Table[SearchIndex]()
    .add_column("ID", lambda index: index.index_id)
    .add_column("NAME", lambda index: index.name)
    .add_column("DATABASE", lambda index: index.database)
    .add_column("COLLECTION", lambda index: index.collection_name)
    .add_column("STATUS", lambda index: str(index.status).upper())
    .add_column("TYPE", lambda index: index.index_type or SearchIndexType.SEARCH)
)


def prompt_if_none(interaction: InputPrompt, value: str | None, message: str) -> str | None:
    """Return value, or ask for it; None means the prompt was canceled."""
    if value is not None:
        return value
    result = interaction.input(InputPromptOptions(message=message))
    if result.canceled:
        return None
    return result.value
