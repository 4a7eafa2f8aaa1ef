"""MongoDB driver adapter for search indexes."""

from atlas_local.mongodb.client import SearchIndexClient
from atlas_local.mongodb.connect import get_mongodb_client

__all__ = ["SearchIndexClient", "get_mongodb_client"]
