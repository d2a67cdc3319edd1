"""
JSON array file management.

Provides the file handle shared by the preset store and the usage ledger.
"""

import copy
import json
import os
import stat
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, List, Union

from .errors import StorageError

# os.umask can only be read by setting it
_UMASK = os.umask(0)
os.umask(_UMASK)


class JsonArrayFile:
    """A file holding one JSON array of objects.

    Every read-modify-write runs under a per-instance lock, and writes go
    through a temporary file that is atomically renamed over the target,
    so readers see either the old or the new array, never a partial one.
    """

    def __init__(self, path: Union[str, Path]):
        """Initialize the handle.

        Args:
            path: Location of the JSON file
        """
        self.path = Path(path)
        self._lock = threading.RLock()

    def ensure_exists(self) -> None:
        """Create the parent directory and an empty array if the file is absent.

        Raises:
            StorageError: If the file cannot be created
        """
        with self._lock:
            if self.path.exists():
                return
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise StorageError(f"Cannot create directory for {self.path}: {e}", self.path) from e
            self.write([])

    def read(self) -> List[Dict[str, Any]]:
        """Read the full array.

        Returns:
            List of stored objects

        Raises:
            StorageError: If the file is missing, unreadable, or not a JSON array
        """
        with self._lock:
            try:
                with open(self.path, "r", encoding="utf-8") as f:
                    data = json.load(f)
            except (OSError, ValueError) as e:
                raise StorageError(f"Cannot read {self.path}: {e}", self.path) from e

        if not isinstance(data, list):
            raise StorageError(f"Expected a JSON array in {self.path}", self.path)
        return data

    def write(self, items: List[Dict[str, Any]]) -> None:
        """Replace the full array atomically.

        Args:
            items: Objects to persist

        Raises:
            StorageError: If the file cannot be written
        """
        with self._lock:
            tmp_path = None
            try:
                fd, tmp_path = tempfile.mkstemp(
                    dir=str(self.path.parent),
                    prefix=f".{self.path.name}.",
                    suffix=".tmp"
                )
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(items, f, indent=2)
                os.chmod(tmp_path, self._file_mode())
                os.replace(tmp_path, self.path)
            except (OSError, TypeError, ValueError) as e:
                if tmp_path is not None and os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise StorageError(f"Cannot write {self.path}: {e}", self.path) from e

    def _file_mode(self) -> int:
        # mkstemp creates 0600 files; keep the existing mode or honour the umask
        try:
            return stat.S_IMODE(os.stat(self.path).st_mode)
        except FileNotFoundError:
            return 0o666 & ~_UMASK

    @contextmanager
    def modify(self) -> Iterator[List[Dict[str, Any]]]:
        """Hold the lock across a read-mutate-write sequence.

        The yielded list is written back when the block exits normally and
        has changed it. If the block raises, nothing is written.
        """
        with self._lock:
            items = self.read()
            snapshot = copy.deepcopy(items)
            yield items
            if items != snapshot:
                self.write(items)
