"""Command-line entry point: run one poll cycle and exit.

Usage
-----
::

    export CARNABOT_SOURCE_URL="https://docs.google.com/.../export?format=csv"
    export ONESIGNAL_APP_ID="..."
    export ONESIGNAL_REST_KEY="..."
    python -m carnabot

Exit status is 0 when the fetch and the snapshot write completed (even if
some notifications failed), 1 when the run was aborted and 2 for
configuration errors.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from carnabot.config import PollerConfig
from carnabot.exceptions import CarnabotError, ConfigError
from carnabot.models.run import RunResult
from carnabot.poller import Poller

_logger = logging.getLogger("carnabot")


async def _run(config: PollerConfig) -> RunResult:
    async with Poller(config) as poller:
        return await poller.run_once()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="carnabot-poll",
        description="Check the spreadsheet once and notify subscribers about changes.",
    )
    parser.add_argument("--dry-run", action="store_true", help="Log messages instead of sending them")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")

    try:
        overrides = {"dry_run": True} if args.dry_run else {}
        config = PollerConfig.from_env(**overrides)
    except ConfigError as exc:
        _logger.error("Configuration error: %s", exc)
        return 2

    try:
        result = asyncio.run(_run(config))
    except CarnabotError as exc:
        _logger.error("Run failed: %s", exc)
        return 1

    return result.exit_code


if __name__ == "__main__":
    sys.exit(main())
