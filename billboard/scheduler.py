import threading
from collections.abc import Callable
from datetime import datetime, time, timedelta

from loguru import logger


class WeeklyScheduler:
    """Call ``job`` every ``interval_weeks`` weeks on ``weekday`` at ``at``.

    ``weekday`` follows ``datetime.weekday()``, Monday is 0. Times are local.
    """

    def __init__(
        self,
        job: Callable[[], object],
        weekday: int,
        at: time,
        interval_weeks: int = 1,
    ) -> None:
        self._job = job
        self._weekday = weekday
        self._at = at
        self._interval = timedelta(weeks=interval_weeks)
        self._next_run = self._first_run(datetime.now())
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    def _first_run(self, now: datetime) -> datetime:
        days_ahead = (self._weekday - now.weekday()) % 7
        first_run = datetime.combine(now.date() + timedelta(days=days_ahead), self._at)
        if first_run <= now:
            first_run += timedelta(weeks=1)
        return first_run

    @property
    def next_run(self) -> datetime:
        return self._next_run

    def run_pending(self) -> bool:
        now = datetime.now()
        if now < self._next_run:
            return False

        logger.info("Running scheduled job due at {}", self._next_run)
        try:
            self._job()
        except Exception:  # noqa: BLE001
            logger.exception("Scheduled job failed")

        while self._next_run <= now:
            self._next_run += self._interval
        logger.info("Next run scheduled for {}", self._next_run)
        return True

    def _seconds_until_next_run(self) -> float:
        return max((self._next_run - datetime.now()).total_seconds(), 0)

    def _loop(self) -> None:
        while not self._stop.wait(self._seconds_until_next_run()):
            self.run_pending()

    def start(self) -> None:
        if self._thread and self._thread.is_alive():
            logger.warning("Scheduler is already running")
            return

        logger.info("Scheduling job, first run at {}", self._next_run)
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._loop, name="weekly-scheduler", daemon=True
        )
        self._thread.start()

    def stop(self) -> None:
        self._stop.set()
        if self._thread:
            self._thread.join()
            self._thread = None
