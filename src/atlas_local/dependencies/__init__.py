"""
Capability Protocols consumed by the commands.

Each Protocol is a single, narrow capability (get a deployment, start a
deployment, create a search index, ...). Commands declare the combination
they need as a composite Protocol, and tests substitute mocks for them.

- deployment: container engine capabilities
- search: search index capabilities
- fs: file access
"""

from atlas_local.dependencies.deployment import (
    ConnectionStringGetter,
    DeploymentCreator,
    DeploymentDeleter,
    DeploymentGetter,
    DeploymentLister,
    DeploymentPauser,
    DeploymentStarter,
    DeploymentStopper,
    DeploymentUnpauser,
    HealthWaiter,
    LogsGetter,
)
from atlas_local.dependencies.fs import FileReader, LocalFileReader
from atlas_local.dependencies.search import (
    CreateSearchIndexModel,
    SearchIndexCreator,
    SearchIndexDeleter,
    SearchIndexDescriber,
    SearchIndexLister,
    SearchIndexStatusGetter,
)

__all__ = [
    "ConnectionStringGetter",
    "CreateSearchIndexModel",
    "DeploymentCreator",
    "DeploymentDeleter",
    "DeploymentGetter",
    "DeploymentLister",
    "DeploymentPauser",
    "DeploymentStarter",
    "DeploymentStopper",
    "DeploymentUnpauser",
    "FileReader",
    "HealthWaiter",
    "LocalFileReader",
    "LogsGetter",
    "SearchIndexCreator",
    "SearchIndexDeleter",
    "SearchIndexDescriber",
    "SearchIndexLister",
    "SearchIndexStatusGetter",
]
