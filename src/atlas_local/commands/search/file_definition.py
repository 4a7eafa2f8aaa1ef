"""Search index definition files.

The file format is the Atlas CLI one:

    {
        "collectionName": "movies",
        "database": "sample_mflix",
        "name": "default",
        "type": "search",
        "definition": {"mappings": {"dynamic": true}}
    }

"type" and "definition" are optional.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from atlas_local.models import SearchIndexType


class SearchIndexCreateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    collection_name: str = Field(alias="collectionName")
    database: str
    name: str
    index_type: SearchIndexType | str | None = Field(default=None, alias="type")
    definition: dict[str, Any] | None = None
