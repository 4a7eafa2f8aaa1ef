"""Build a search index client for a local deployment."""

import logging

from pymongo import AsyncMongoClient
from pymongo.errors import PyMongoError
from python_on_whales.exceptions import DockerException

from atlas_local.docker.client import DockerDeploymentClient
from atlas_local.exceptions import (
    AtlasLocalError,
    ConnectingToDockerError,
    CreatingMongoClientError,
    GettingConnectionStringError,
    MongoClientError,
)
from atlas_local.mongodb.client import SearchIndexClient

logger = logging.getLogger(__name__)


async def get_mongodb_client(
    deployment_name: str,
    username: str | None = None,
    password: str | None = None,
    engine: DockerDeploymentClient | None = None,
) -> SearchIndexClient | MongoClientError:
    """
    Create a search index client for a local deployment.

    Failures are returned, not raised: search commands report them as a
    failed result.

    Args:
        deployment_name: Deployment to connect to.
        username: Replaces the connection string's user when given.
        password: Replaces the connection string's password when given.
        engine: Docker client, a new one by default.

    Returns:
        A SearchIndexClient, or the MongoClientError explaining why there is none.
    """
    engine = engine or DockerDeploymentClient()

    try:
        await engine.ping()
    except DockerException as e:
        return ConnectingToDockerError(str(e))

    try:
        connection_string = await engine.get_connection_string(deployment_name)
    except AtlasLocalError as e:
        return GettingConnectionStringError(str(e))

    credentials = {}
    if username is not None or password is not None:
        credentials = {"username": username, "password": password}

    try:
        client = AsyncMongoClient(connection_string, **credentials)
    except PyMongoError as e:
        return CreatingMongoClientError(str(e))

    logger.debug("created mongodb client for deployment '%s'", deployment_name)
    return SearchIndexClient(client)
