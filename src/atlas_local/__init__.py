"""
Manage local MongoDB Atlas deployments running in Docker.

This package provides:
- commands: one orchestrator per user-facing operation (setup, start, stop,
  delete, list, logs, connect, search indexes)
- dependencies: capability Protocols consumed by the commands
- interaction: prompts and spinners
- docker / mongodb: engine and driver adapters implementing the capabilities
- cli: the typer application exposing everything as `atlas-local`
"""

__version__ = "0.1.0"
