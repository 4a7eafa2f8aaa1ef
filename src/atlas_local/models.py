"""
Data models for local deployments and search indexes.

This module defines:
- State: container lifecycle state of a deployment
- MongoDBVersion: requested server version (latest, preview or numeric)
- PortBinding / BindingType: how the deployment port is published
- CreateDeploymentOptions: immutable settings for the creation pipeline
- Deployment: a local deployment as read from the container engine
- ListedDeployment: the projection shown by `list`
- WatchOptions / LogsOptions: options for health waits and log retrieval
- SearchIndex / SearchIndexStatus / SearchIndexType: search index projections

Per project patterns:
- Use str enum for JSON serialization compatibility
- Pydantic BaseModel for validation and serialization
- Field() with descriptions for documentation
"""

import re
from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

_SEMVER = re.compile(r"^\d+\.\d+\.\d+$")
_VERSION = re.compile(r"^(\d+)(?:\.(\d+))?(?:\.(\d+))?$")


class State(str, Enum):
    """
    Container lifecycle state of a deployment.

    Mirrors the Docker container states.
    """

    CREATED = "Created"
    """Container exists but was never started."""

    RUNNING = "Running"
    """Container is running."""

    PAUSED = "Paused"
    """Container processes are frozen."""

    RESTARTING = "Restarting"
    """Container is being restarted by its restart policy."""

    EXITED = "Exited"
    """Container was stopped or its main process ended."""

    DEAD = "Dead"
    """Container could not be stopped or removed; unusable."""

    REMOVING = "Removing"
    """Container is being removed."""

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_docker(cls, status: str) -> "State":
        """Convert a Docker status string ("running", "exited", ...)."""
        try:
            return cls(status.capitalize())
        except ValueError:
            raise ValueError(f"unknown container state '{status}'") from None


class MongoDBType(str, Enum):
    """Flavour of the MongoDB server inside the image."""

    COMMUNITY = "community"
    ENTERPRISE = "enterprise"


class CreationSource(str, Enum):
    """Who created a deployment, recorded as a container label."""

    ATLAS_LOCAL = "atlas-local"
    """Created by this CLI."""

    CONTAINER = "container"
    """Created directly with docker run / compose."""


class BindingType(str, Enum):
    """Interface the deployment port is published on."""

    LOOPBACK = "loopback"
    """Only reachable from 127.0.0.1."""

    ANY_INTERFACE = "anyInterface"
    """Reachable on every host interface (0.0.0.0)."""


class PortBinding(BaseModel):
    """Host port binding of the deployment's MongoDB port."""

    binding_type: BindingType = Field(description="Interface the port is bound to")
    port: int | None = Field(default=None, description="Host port, None to auto-assign")

    @property
    def host_ip(self) -> str:
        return "0.0.0.0" if self.binding_type is BindingType.ANY_INTERFACE else "127.0.0.1"


@dataclass(frozen=True)
class MongoDBVersion:
    """
    Requested MongoDB server version.

    Either a tag ("latest" or "preview") or a numeric version with a major
    part and optional minor and patch parts. str() renders the image tag.
    """

    tag: str | None = None
    major: int | None = None
    minor: int | None = None
    patch: int | None = None

    LATEST = "latest"
    PREVIEW = "preview"

    @classmethod
    def parse(cls, value: str) -> "MongoDBVersion":
        """Parse "latest", "preview", "8", "8.0" or "8.0.4".

        Raises:
            ValueError: If the string is not a valid version.
        """
        text = value.strip()
        if text in (cls.LATEST, cls.PREVIEW):
            return cls(tag=text)

        match = _VERSION.match(text)
        if match is None:
            raise ValueError(
                f"invalid MongoDB version '{value}', "
                "expected latest, preview, <major>, <major>.<minor> or <major>.<minor>.<patch>"
            )
        major, minor, patch = (int(part) if part is not None else None for part in match.groups())
        return cls(major=major, minor=minor, patch=patch)

    def __str__(self) -> str:
        if self.tag is not None:
            return self.tag
        return ".".join(str(part) for part in (self.major, self.minor, self.patch) if part is not None)


class CreateDeploymentOptions(BaseModel):
    """
    Settings for creating a deployment.

    Built once per setup invocation and never modified afterwards.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str | None = Field(default=None, description="Deployment name, generated if None")
    creation_source: CreationSource = CreationSource.ATLAS_LOCAL
    wait_until_healthy: bool = Field(default=True, description="Wait for the health check")
    wait_until_healthy_timeout: float = Field(default=60.0, description="Seconds to wait")
    local_seed_location: str | None = Field(default=None, description="Host dir with init scripts")
    mongodb_initdb_root_username: str | None = None
    mongodb_initdb_root_password: str | None = None
    load_sample_data: bool | None = None
    mongodb_version: MongoDBVersion | None = None
    port_binding: PortBinding | None = None
    image: str | None = Field(default=None, description="Image override")
    skip_pull_image: bool = False
    voyage_api_key: str | None = None
    do_not_track: bool = False


class Deployment(BaseModel):
    """
    A local deployment as read from the container engine.

    Created by the engine adapter from a container inspection; commands only
    read it.
    """

    container_id: str
    name: str | None = None
    mongodb_version: str = Field(description="Semantic version of the server, e.g. 8.2.2")
    state: State
    port_bindings: PortBinding | None = None
    mongodb_type: MongoDBType = MongoDBType.COMMUNITY
    creation_source: str | None = None
    local_seed_location: str | None = None
    mongodb_initdb_database: str | None = None
    mongodb_initdb_root_username: str | None = None
    mongodb_initdb_root_password: str | None = None
    mongodb_load_sample_data: bool | None = None
    voyage_api_key: str | None = None
    do_not_track: bool = False

    @field_validator("mongodb_version")
    @classmethod
    def _check_semver(cls, value: str) -> str:
        if not _SEMVER.match(value):
            raise ValueError(f"'{value}' is not a semantic version")
        return value

    @property
    def display_name(self) -> str:
        """Deployment name, falling back to the container id."""
        return self.name or self.container_id


class ListedDeployment(BaseModel):
    """Row of the `list` command."""

    name: str
    mongo_db_version: str
    state: State

    @classmethod
    def from_deployment(cls, deployment: Deployment) -> "ListedDeployment":
        return cls(
            name=deployment.display_name,
            mongo_db_version=deployment.mongodb_version,
            state=deployment.state,
        )


class WatchOptions(BaseModel):
    """Options for waiting until a deployment is healthy."""

    timeout: float = Field(default=60.0, description="Seconds before giving up")
    allow_unhealthy_initial_state: bool = Field(
        default=False,
        description="Tolerate an unhealthy report before the first healthy one (unpausing)",
    )


class LogsOptions(BaseModel):
    """Which container streams to read."""

    stdout: bool = True
    stderr: bool = True
    tail: int | None = None


class SearchIndexStatus(str, Enum):
    """
    Status of a search index, as reported by $listSearchIndexes.
    """

    BUILDING = "BUILDING"
    """Being built or re-built after an edit."""

    DOES_NOT_EXIST = "DOES_NOT_EXIST"
    """The index does not exist."""

    DELETING = "DELETING"
    """Being deleted."""

    FAILED = "FAILED"
    """Build failed, e.g. invalid definition."""

    PENDING = "PENDING"
    """Not yet started building."""

    READY = "READY"
    """Ready to support queries."""

    STALE = "STALE"
    """Queryable but no longer replicating; may return stale results."""

    def __str__(self) -> str:
        return self.value.lower().replace("_", " ")

    @property
    def is_pending(self) -> bool:
        """True while the index may still become ready."""
        return self in (SearchIndexStatus.PENDING, SearchIndexStatus.BUILDING, SearchIndexStatus.STALE)


class SearchIndexType(str, Enum):
    """Known search index types. Other strings are passed through as-is."""

    SEARCH = "search"
    VECTOR_SEARCH = "vectorSearch"

    def __str__(self) -> str:
        return self.value


class SearchIndex(BaseModel):
    """A search index as listed or described by the server."""

    index_id: str
    name: str
    database: str
    collection_name: str
    status: SearchIndexStatus
    index_type: SearchIndexType | str | None = None
