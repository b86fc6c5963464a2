"""File-backed snapshot persistence.

The snapshot is stored as a plain JSON object ``{name: {column: value}}``.
Writes go to a temporary sibling file which is then renamed over the target,
so an interrupted run leaves either the old or the new snapshot, never a
partial one.
"""

from __future__ import annotations

import contextlib
import json
import logging
import os
import tempfile
from collections.abc import Mapping
from pathlib import Path

from pydantic import ValidationError

from carnabot.exceptions import SnapshotStoreError
from carnabot.models.snapshot import Snapshot

_logger = logging.getLogger(__name__)


class SnapshotStore:
    """Load and atomically replace the persisted snapshot.

    Records are written keyed by spreadsheet column (``{"local": ..., "hora":
    ...}``) when *columns* maps tracked field names to their columns, which
    keeps the file compatible with snapshots written by earlier pollers.
    """

    def __init__(
        self,
        path: str | os.PathLike[str],
        *,
        columns: Mapping[str, str] | None = None,
    ) -> None:
        self._path = Path(path)
        self._to_column: dict[str, str] = dict(columns or {})
        self._to_field: dict[str, str] = {column: name for name, column in self._to_column.items()}

    @property
    def path(self) -> Path:
        return self._path

    def _decode_record(self, record: Mapping[str, str]) -> dict[str, str]:
        return {self._to_field.get(key, key): value for key, value in record.items()}

    def _encode_record(self, record: Mapping[str, str]) -> dict[str, str]:
        return {self._to_column.get(key, key): value for key, value in record.items()}

    def load(self) -> Snapshot:
        """Return the persisted snapshot, or an empty one.

        A missing file is the normal first-run case.  A file that cannot be
        decoded is logged and treated the same way: the next save replaces it
        and no notifications fire for a baseline.

        Raises :class:`SnapshotStoreError` if the file exists but cannot be read.
        """
        try:
            raw = self._path.read_bytes()
        except FileNotFoundError:
            _logger.info("No snapshot at %s; starting from an empty baseline", self._path)
            return Snapshot()
        except OSError as exc:
            raise SnapshotStoreError(f"Could not read snapshot from {self._path}: {exc}") from exc

        try:
            data = json.loads(raw.decode("utf-8"))
            if not isinstance(data, dict):
                raise ValueError(f"expected a JSON object, got {type(data).__name__}")
            return Snapshot.from_mapping({name: self._decode_record(record) for name, record in data.items()})
        except (ValueError, TypeError, AttributeError, ValidationError) as exc:
            # UnicodeDecodeError is a ValueError.
            _logger.warning("Ignoring unreadable snapshot at %s: %s", self._path, exc)
            return Snapshot()

    def save(self, snapshot: Snapshot) -> None:
        """Replace the persisted snapshot with *snapshot*.

        Raises :class:`SnapshotStoreError` if the file cannot be written.
        """
        records = {name: self._encode_record(record) for name, record in snapshot.entities.items()}
        payload = json.dumps(records, ensure_ascii=False, indent=2)
        directory = self._path.parent
        tmp_name: str | None = None
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{self._path.name}.", suffix=".tmp", dir=directory)
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(payload)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, self._path)
            tmp_name = None
        except OSError as exc:
            raise SnapshotStoreError(f"Could not write snapshot to {self._path}: {exc}") from exc
        finally:
            if tmp_name is not None:
                with contextlib.suppress(OSError):
                    os.unlink(tmp_name)

        _logger.debug("Saved snapshot with %d entities to %s", len(snapshot), self._path)
