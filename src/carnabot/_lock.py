"""Single-flight guard for poll runs.

Two overlapping runs would both diff against the same prior snapshot and
both replace it, losing or duplicating notifications.  :class:`RunLock`
takes an exclusive, non-blocking advisory lock on a file keyed by the data
source so a second invocation fails fast instead.
"""

from __future__ import annotations

import fcntl
import hashlib
import logging
import os
from pathlib import Path
from typing import Any

from carnabot.exceptions import RunInProgressError

_logger = logging.getLogger(__name__)


def lock_path_for(source_url: str, directory: str | os.PathLike[str]) -> Path:
    """Lock file for *source_url*, placed in *directory*."""
    digest = hashlib.sha1(source_url.encode("utf-8")).hexdigest()[:16]
    return Path(directory) / f".carnabot-{digest}.lock"


class RunLock:
    """Exclusive per-source lock, usable as a context manager."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._path = Path(path)
        self._fd: int | None = None

    @property
    def locked(self) -> bool:
        return self._fd is not None

    def acquire(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(self._path, os.O_RDWR | os.O_CREAT, 0o644)
        try:
            fcntl.flock(fd, fcntl.LOCK_EX | fcntl.LOCK_NB)
        except BlockingIOError as exc:
            os.close(fd)
            raise RunInProgressError(f"Another run holds {self._path}") from exc
        self._fd = fd
        _logger.debug("Acquired run lock %s", self._path)

    def release(self) -> None:
        if self._fd is None:
            return
        try:
            fcntl.flock(self._fd, fcntl.LOCK_UN)
        finally:
            os.close(self._fd)
            self._fd = None
        _logger.debug("Released run lock %s", self._path)

    def __enter__(self) -> RunLock:
        self.acquire()
        return self

    def __exit__(self, *exc: Any) -> None:
        self.release()
