import logging
from typing import Callable

logger = logging.getLogger(__name__)


class LivenessSweeper:
    """Run ``sweep`` every ``interval`` seconds on a background task.

    ``start_task`` and ``sleep`` come from the Socket.IO server so the loop
    cooperates with whatever async mode it runs under. The loop sleeps in
    short steps, so ``stop()`` takes effect within one step.
    """

    def __init__(self, sweep: Callable[[], list], interval: float,
                 start_task: Callable, sleep: Callable[[float], None], step: float = 1.0):
        self.sweep = sweep
        self.interval = interval
        self.start_task = start_task
        self.sleep = sleep
        self.step = step
        self.running = False
        self._task = None

    def start(self) -> None:
        if self.running:
            return
        self.running = True
        self._task = self.start_task(self._run)
        logger.info(f"[sweeper-start] interval={self.interval}s")

    def stop(self) -> None:
        if self.running:
            logger.info("[sweeper-stop]")
        self.running = False

    def _wait(self) -> bool:
        slept = 0.0
        while self.running and slept < self.interval:
            step = min(self.step, self.interval - slept)
            self.sleep(step)
            slept += step
        return self.running

    def _run(self) -> None:
        while self._wait():
            try:
                dropped = self.sweep()
            except Exception:
                # Keep the timer alive; the next tick retries
                logger.exception("[sweeper-error]")
                continue
            if dropped:
                logger.info(f"[sweeper-tick] dropped={len(dropped)}")
