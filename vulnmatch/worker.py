"""Standalone scan worker: wires DB, logging and the scheduler together."""

from __future__ import annotations

import asyncio
import os
import signal

import structlog

from vulnmatch.core.database import dispose_engine, init_session_factory
from vulnmatch.core.logging import setup_logging
from vulnmatch.dao.vulnerability_match_dao import VulnerabilityMatchDAO
from vulnmatch.engines.match_scanner.scanner import MatchScanner
from vulnmatch.engines.match_scanner.schemes import SchemeMapping
from vulnmatch.scheduler import create_scheduler

logger = structlog.get_logger(__name__)

SCAN_BATCH_SIZE_ENV = "VULNMATCH_SCAN_BATCH_SIZE"


def scan_batch_size_from_env() -> int | None:
    """``VULNMATCH_SCAN_BATCH_SIZE`` as a positive int, None when unset."""
    raw = os.environ.get(SCAN_BATCH_SIZE_ENV, "").strip()
    if not raw:
        return None
    if not raw.isdecimal() or int(raw) < 1:
        raise ValueError(f"{SCAN_BATCH_SIZE_ENV} must be a positive integer, got {raw!r}")
    return int(raw)


def build_scanner() -> MatchScanner:
    """Scanner configured from the environment; bad values fail here, at startup."""
    return MatchScanner(
        VulnerabilityMatchDAO(),
        schemes=SchemeMapping.from_env(),
        batch_size=scan_batch_size_from_env(),
    )


async def run_worker(stop: asyncio.Event | None = None) -> None:
    """Run the periodic scan until *stop* is set (or SIGINT/SIGTERM)."""
    if stop is None:
        stop = asyncio.Event()
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, stop.set)

    scanner = build_scanner()
    factory = init_session_factory()
    scheduler = create_scheduler(factory, scanner=scanner)
    await scheduler.start()
    try:
        await stop.wait()
    finally:
        await scheduler.stop()
        await dispose_engine()


def main() -> None:
    setup_logging()
    logger.info("worker.starting")
    asyncio.run(run_worker())
