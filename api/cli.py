"""One-shot row forward, run once at process start.

Configuration comes from the SHIFTLINK_* environment variables. The exit code
is 0 whatever the outcome; failures are reported through the log stream.
"""
from __future__ import annotations

import asyncio

from api.config import Settings
from api.jobs import run_forwarder
from api.logging import get_logger, setup_logging


def main() -> int:
    settings = Settings.from_env()
    setup_logging(settings.log_level)
    logger = get_logger("shiftlink.forward")
    outcome = asyncio.run(run_forwarder(settings, logger))
    logger.debug("Forward run finished: %s", outcome.status)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
