"""
File store and file picker capabilities.

The engine never touches the filesystem directly; it is handed a FileStore.
LocalFileStore is the real implementation, running blocking pathlib calls in
worker threads so the session's event loop is never blocked.
"""

import asyncio
import errno
import logging
from pathlib import Path
from typing import List, Optional, Protocol

from .errors import FileStoreError, NotFoundError, PermissionDeniedError

logger = logging.getLogger(__name__)


class FileStore(Protocol):
    """Asynchronous text file access used by the engine."""

    async def read(self, path: Path) -> str:
        """Return file text. Raises NotFoundError or PermissionDeniedError."""
        ...

    async def write(self, path: Path, text: str) -> None:
        """Write text, replacing any existing content."""
        ...

    async def list(self, directory: Path) -> List[str]:
        """File names in directory (empty if the directory is missing)."""
        ...

    async def size(self, path: Path) -> int:
        """Size of the file in bytes."""
        ...

    async def delete(self, path: Path) -> None:
        """Remove the file. Raises NotFoundError if absent."""
        ...


class FilePicker(Protocol):
    """User-driven path selection; None means the user cancelled."""

    async def pick_open(self, title: str) -> Optional[Path]:
        ...

    async def pick_save(self, title: str, default_name: str) -> Optional[Path]:
        ...


def translate_os_error(error: OSError, path: Path, operation: str) -> Exception:
    """Map an OSError onto the engine's error taxonomy."""
    if isinstance(error, FileNotFoundError) or error.errno == errno.ENOENT:
        return NotFoundError(str(path))
    if isinstance(error, PermissionError) or error.errno in (errno.EACCES, errno.EPERM):
        return PermissionDeniedError(str(path), operation)
    return FileStoreError(str(path), operation, error.strerror or str(error))


class LocalFileStore:
    """FileStore backed by the local filesystem."""

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding

    async def read(self, path: Path) -> str:
        try:
            return await asyncio.to_thread(path.read_text, encoding=self.encoding)
        except OSError as e:
            raise translate_os_error(e, path, "read") from e

    async def write(self, path: Path, text: str) -> None:
        def _write():
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding=self.encoding)

        try:
            await asyncio.to_thread(_write)
        except OSError as e:
            raise translate_os_error(e, path, "write") from e
        logger.debug(f"Wrote {len(text)} characters to {path}")

    async def list(self, directory: Path) -> List[str]:
        def _list():
            if not directory.is_dir():
                return []
            return sorted(p.name for p in directory.iterdir() if p.is_file())

        try:
            return await asyncio.to_thread(_list)
        except OSError as e:
            raise translate_os_error(e, directory, "list") from e

    async def size(self, path: Path) -> int:
        try:
            stat = await asyncio.to_thread(path.stat)
        except OSError as e:
            raise translate_os_error(e, path, "stat") from e
        return stat.st_size

    async def delete(self, path: Path) -> None:
        try:
            await asyncio.to_thread(path.unlink)
        except OSError as e:
            raise translate_os_error(e, path, "delete") from e
        logger.debug(f"Deleted {path}")
