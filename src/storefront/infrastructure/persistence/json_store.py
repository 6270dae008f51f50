"""A JSON document on disk with locked read-modify-write cycles.

Writers take an exclusive ``flock`` on a sidecar lock file next to the
document, then replace the document atomically through a temp file.
Readers do not lock; they always see either the old or the new file.
"""

from __future__ import annotations

import copy
import fcntl
import json
import os
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any


class JsonStore:

    def __init__(self, file_path: Path, default: Any) -> None:
        self._file_path = file_path
        self._default = default
        self._lock_path = file_path.parent / f".{file_path.name}.lock"

    @contextmanager
    def locked(self) -> Iterator[None]:
        """Hold the exclusive lock for one read-modify-write cycle.

        Not re-entrant: never call ``locked()`` again inside the block.
        """
        self._ensure_dir()
        with open(self._lock_path, "w") as lock_file:
            fcntl.flock(lock_file.fileno(), fcntl.LOCK_EX)
            try:
                yield
            finally:
                fcntl.flock(lock_file.fileno(), fcntl.LOCK_UN)

    def load(self) -> Any:
        if not self._file_path.exists():
            return copy.deepcopy(self._default)
        with open(self._file_path, "r", encoding="utf-8") as f:
            return json.load(f)

    def persist(self, data: Any) -> None:
        """Write ``data`` atomically."""
        self._ensure_dir()

        fd, temp_path = tempfile.mkstemp(
            dir=self._file_path.parent, prefix=f".{self._file_path.stem}_", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
                f.write("\n")
            os.replace(temp_path, self._file_path)
        except Exception:
            try:
                os.unlink(temp_path)
            except OSError:
                pass
            raise

    def _ensure_dir(self) -> None:
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
