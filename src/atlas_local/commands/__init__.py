"""
Command orchestrators.

One class per user-facing operation. Each takes its capabilities and
interaction surface as constructor arguments and exposes a single
``execute()`` coroutine returning a tagged result:

- setup.Setup, start.Start, stop.Stop, delete.Delete
- list.List, logs.Logs, connect.Connect
- search.create.CreateSearchIndex, search.list.ListSearchIndexes,
  search.delete.DeleteSearchIndex, search.describe.DescribeSearchIndex
"""
