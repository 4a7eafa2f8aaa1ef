"""File access capability."""

import asyncio
from pathlib import Path
from typing import Protocol, runtime_checkable


@runtime_checkable
class FileReader(Protocol):
    async def read_to_string(self, path: str) -> str: ...


class LocalFileReader:
    """Reads UTF-8 files from the local filesystem without blocking the loop."""

    async def read_to_string(self, path: str) -> str:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, Path(path).read_text, "utf-8")
