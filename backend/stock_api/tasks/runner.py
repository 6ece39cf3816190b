import asyncio
from typing import Optional

from ..utils.logger import log
from .synthesizer import PriceSynthesizer

RESTART_DELAY = 5


class SynthesisScheduler:
    """Runs synthesis rounds on a fixed cadence in one background task."""

    def __init__(self, synthesizer: PriceSynthesizer, interval: float = 15, restart_delay: float = RESTART_DELAY):
        self.synthesizer = synthesizer
        self.interval = interval
        self.restart_delay = restart_delay
        self.rounds = 0
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self):
        if self.running:
            return
        self._task = asyncio.create_task(task_wrapper(self.synthesis_loop, "Price Synthesizer", self.restart_delay))
        log.info("🚀 Background tasks started")

    async def stop(self):
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        log.info("🛑 Background tasks stopped")

    async def synthesis_loop(self):
        # first round fires one interval after start, like a cron tick
        while True:
            await asyncio.sleep(self.interval)
            log.debug("Running scheduled task: synthesize prices")
            await self.synthesizer.run_round()
            self.rounds += 1


async def task_wrapper(coro, name: str, restart_delay: float = RESTART_DELAY):
    while True:
        try:
            log.info(f"🔥 Starting: {name}")
            await coro()
        except asyncio.CancelledError:
            log.warning(f"⚠️ {name} cancelled.")
            raise
        except Exception as e:
            log.error(f"❌ {name} crashed: {e}")
            await asyncio.sleep(restart_delay)
            log.info(f"🔄 Restarting {name}...")
