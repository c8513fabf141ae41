"""
Cache Store
===========

Disk cache of encoded portal images, one ``<address>.png`` file per address.
Writes go to a temporary file in the cache directory and are renamed into place,
so a reader never sees a partial image.
"""

import contextlib
import os
import tempfile
from pathlib import Path
from typing import Any

from portal_glyphs.config.logging import get_logger
from portal_glyphs.core.errors import CacheIOError

logger = get_logger(__name__)


class CacheStore:
    """File-per-address image cache."""

    def __init__(self, cache_dir: Path, extension: str = "png"):
        self.cache_dir = Path(cache_dir)
        self.extension = extension
        self.logger: Any = logger.bind(component="cache_store")

    def path_for(self, address: str) -> Path:
        return self.cache_dir / f"{address}.{self.extension}"

    def exists(self, address: str) -> bool:
        """True iff the cache file for ``address`` is present and stat-able."""
        try:
            self.path_for(address).stat()
        except OSError:
            return False
        return True

    def read(self, address: str) -> bytes:
        """Return the full cached file contents."""
        path = self.path_for(address)
        try:
            return path.read_bytes()
        except OSError as e:
            self.logger.error("Cache read failed", path=str(path), error=str(e))
            raise CacheIOError(f"cache open: {e}", path=path, address=address) from e

    def write(self, address: str, data: bytes) -> Path:
        """
        Persist ``data`` as the cache entry for ``address``.

        Returns:
            Path of the written file

        Raises:
            CacheIOError: If the directory cannot be created or the file cannot
                be written, flushed or moved into place
        """
        path = self.path_for(address)
        self._ensure_directory()

        try:
            fd, tmp_name = tempfile.mkstemp(
                dir=self.cache_dir, prefix=f".{address}.", suffix=".tmp"
            )
        except OSError as e:
            self.logger.error("Creating cache file failed", path=str(path), error=str(e))
            raise CacheIOError(f"creating image file: {e}", path=path, address=address) from e

        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, path)
        except OSError as e:
            with contextlib.suppress(OSError):
                os.unlink(tmp_name)
            self.logger.error("Writing cache file failed", path=str(path), error=str(e))
            raise CacheIOError(f"flushing image to disk: {e}", path=path, address=address) from e

        self.logger.debug("Cached image", path=str(path), file_size=len(data))
        return path

    def _ensure_directory(self) -> None:
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            self.logger.error("Creating cache directory failed", path=str(self.cache_dir), error=str(e))
            raise CacheIOError(f"creating cache directory: {e}", path=self.cache_dir) from e
        if not self.cache_dir.is_dir():
            raise CacheIOError("accessing cache directory: not a directory", path=self.cache_dir)

    def entry_count(self) -> int:
        try:
            return sum(1 for _ in self.cache_dir.glob(f"*.{self.extension}"))
        except OSError:
            return 0

    def is_writable(self) -> bool:
        """True if the cache directory exists (or could be created) and is writable."""
        target = self.cache_dir
        while not target.exists():
            if target.parent == target:
                return False
            target = target.parent
        return target.is_dir() and os.access(target, os.W_OK)
