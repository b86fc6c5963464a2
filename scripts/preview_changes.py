#!/usr/bin/env python3
"""Show which notifications a poll would send, without sending anything.

Compares a stored snapshot with either a second snapshot file or a CSV export
and prints the detected changes and the composed messages.

Usage
-----
::

    python scripts/preview_changes.py carnabot_db.json export.csv
    python scripts/preview_changes.py old_db.json new_db.json
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from carnabot._tabular import parse_rows  # noqa: E402
from carnabot.composer import NotificationComposer  # noqa: E402
from carnabot.config import PollerConfig, PushProviderConfig  # noqa: E402
from carnabot.diff import diff_snapshots, group_by_entity  # noqa: E402
from carnabot.fetcher import build_snapshot  # noqa: E402
from carnabot.models.snapshot import Snapshot  # noqa: E402
from carnabot.store import SnapshotStore  # noqa: E402

MAX_VAL_WIDTH = 40


def _truncate(val: str, width: int = MAX_VAL_WIDTH) -> str:
    if len(val) <= width:
        return val
    return val[: width - 3] + "..."


def _store(path: Path, config: PollerConfig) -> SnapshotStore:
    return SnapshotStore(path, columns={field.name: field.column for field in config.tracked_fields})


def _load_current(path: Path, config: PollerConfig) -> Snapshot:
    if path.suffix.lower() == ".csv":
        return build_snapshot(parse_rows(path.read_text(encoding="utf-8")), config)
    return _store(path, config).load()


def main() -> None:
    parser = argparse.ArgumentParser(description="Preview carnabot notifications for two snapshots.")
    parser.add_argument("prior", help="Stored snapshot (JSON)")
    parser.add_argument("current", help="Newer snapshot (JSON) or CSV export")
    parser.add_argument("--identifier-column", default="bloco", help="Identifier column in the CSV header")
    args = parser.parse_args()

    config = PollerConfig(
        source_url=str(args.current),
        push=PushProviderConfig(app_id="preview", rest_key="preview"),
        identifier_column=args.identifier_column,
    )

    prior = _store(Path(args.prior), config).load()
    current = _load_current(Path(args.current), config)
    changes = diff_snapshots(prior, current, config.field_names)

    new_names = [name for name in current.names() if name not in prior]
    gone_names = [name for name in prior.names() if name not in current]
    print(f"Prior: {len(prior)} entities   Current: {len(current)} entities")
    print(f"First sightings (no alert): {len(new_names)}   Disappeared (no alert): {len(gone_names)}")
    print()

    if not changes:
        print("No notifications would be sent.")
        return

    name_w = max(max(len(_truncate(c.entity)) for c in changes), 6)
    field_w = max(max(len(c.field) for c in changes), 5)
    old_w = max(max(len(_truncate(c.old)) for c in changes), 3)

    header = f"{'Entity':<{name_w}}  {'Field':<{field_w}}  {'Old':<{old_w}}  New"
    print(header)
    print("─" * (len(header) + MAX_VAL_WIDTH))
    for c in changes:
        print(f"{_truncate(c.entity):<{name_w}}  {c.field:<{field_w}}  {_truncate(c.old):<{old_w}}  {_truncate(c.new)}")

    composer = NotificationComposer(config)
    print()
    total = 0
    for entity, entity_changes in group_by_entity(changes).items():
        for message in composer.compose(entity, entity_changes, current.get(entity)):
            total += 1
            print(f"  → {message.body}")

    print(f"\n{total} notification(s) would be sent.")


if __name__ == "__main__":
    main()
