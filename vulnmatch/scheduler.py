"""Scheduler — periodic match scan loop with an on-demand trigger."""

from __future__ import annotations

import asyncio
import os
from collections.abc import Awaitable, Callable

import structlog
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from vulnmatch.engines.match_scanner.scanner import MatchScanner

logger = structlog.get_logger(__name__)

DEFAULT_SCAN_INTERVAL = 3600.0


class EngineLoop:
    """Single engine loop, woken by ``trigger`` or after ``interval`` seconds."""

    def __init__(
        self,
        name: str,
        run_fn: Callable[[], Awaitable[int]],
        interval: float,
    ) -> None:
        self.name = name
        self.run_fn = run_fn
        self.interval = interval
        self.trigger = asyncio.Event()

    async def run_once(self) -> int | None:
        """Run one cycle; failures are logged and the loop carries on."""
        try:
            processed = await self.run_fn()
        except Exception:
            logger.exception("engine.error", engine=self.name)
            return None
        logger.info("engine.cycle", engine=self.name, processed=processed)
        return processed

    async def loop(self) -> None:
        while True:
            try:
                await asyncio.wait_for(self.trigger.wait(), timeout=self.interval)
                self.trigger.clear()
            except asyncio.TimeoutError:
                pass
            await self.run_once()


class Scheduler:
    """Manages lifecycle of EngineLoop tasks."""

    def __init__(self, loops: list[EngineLoop]) -> None:
        self._loops = loops
        self._tasks: list[asyncio.Task[None]] = []

    async def start(self, run_immediately: bool = True) -> None:
        self._tasks = [
            asyncio.create_task(loop.loop(), name=f"engine-{loop.name}") for loop in self._loops
        ]
        if run_immediately:
            for loop in self._loops:
                loop.trigger.set()
        logger.info("scheduler.started", engines=[loop.name for loop in self._loops])

    async def stop(self) -> None:
        """Cancel all loops; an in-flight scan transaction rolls back."""
        for task in self._tasks:
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks.clear()
        logger.info("scheduler.stopped")


def create_scheduler(
    session_factory: async_sessionmaker[AsyncSession],
    *,
    scanner: MatchScanner,
    interval: float | None = None,
) -> Scheduler:
    """Build a Scheduler running ``scanner`` every ``VULNMATCH_SCAN_INTERVAL`` s."""
    if interval is None:
        interval = float(os.environ.get("VULNMATCH_SCAN_INTERVAL", DEFAULT_SCAN_INTERVAL))

    async def _scan_matches() -> int:
        return await scanner.run(session_factory)

    return Scheduler([EngineLoop("match_scanner", _scan_matches, interval)])
