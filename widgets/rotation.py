"""
Ad rotation state and the timer that drives it.

Each panel owns one AdRotationStore (the active ad list, the cursor and the
loading flag) and one RotationTimer. Timers are APScheduler interval jobs on a
shared AsyncIOScheduler, one job per panel instance, removed whenever the
panel tears down or drops to a single ad.
"""
import logging
from typing import List, Optional, Sequence, Tuple

from apscheduler.jobstores.base import JobLookupError
from apscheduler.jobstores.memory import MemoryJobStore
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from schemas import Ad

logger = logging.getLogger(__name__)

job_defaults = {
    'coalesce': True,
    'max_instances': 1,
    'misfire_grace_time': 1
}

_scheduler: Optional[AsyncIOScheduler] = None
_users = 0


def get_rotation_scheduler() -> AsyncIOScheduler:
    """Shared scheduler for panel rotation, started on first use (needs a running loop).

    Every call must be paired with release_rotation_scheduler().
    """
    global _scheduler, _users
    if _scheduler is None:
        _scheduler = AsyncIOScheduler(
            jobstores={'default': MemoryJobStore()},
            job_defaults=job_defaults,
        )
    if not _scheduler.running:
        _scheduler.start()
        logger.info("✅ Ad rotation scheduler started")
    _users += 1
    return _scheduler


def release_rotation_scheduler():
    """Drop one user of the shared scheduler, shutting it down after the last."""
    global _users
    _users = max(0, _users - 1)
    if _users == 0:
        shutdown_rotation_scheduler()


def shutdown_rotation_scheduler():
    global _scheduler, _users
    if _scheduler is not None and _scheduler.running:
        _scheduler.shutdown(wait=False)
        logger.info("✅ Ad rotation scheduler stopped")
    _scheduler = None
    _users = 0


class AdRotationStore:
    """Active ad list plus cursor. Invariant: 0 <= index < len(ads) while ads exist."""

    def __init__(self):
        self._ads: List[Ad] = []
        self._index = 0
        self.loading = True

    def __len__(self) -> int:
        return len(self._ads)

    @property
    def ads(self) -> Tuple[Ad, ...]:
        return tuple(self._ads)

    @property
    def index(self) -> int:
        return self._index

    @property
    def current(self) -> Optional[Ad]:
        if not self._ads:
            return None
        return self._ads[self._index]

    def replace(self, ads: Sequence[Ad]):
        """Swap in a new list wholesale and rewind the cursor."""
        self._ads = list(ads)
        self._index = 0
        self.loading = False

    def advance(self) -> int:
        if len(self._ads) > 1:
            self._index = (self._index + 1) % len(self._ads)
        return self._index

    def select(self, index: int):
        if not 0 <= index < len(self._ads):
            raise IndexError(f"Ad index {index} out of range for {len(self._ads)} ads")
        self._index = index

    def clear(self):
        self._ads = []
        self._index = 0
        self.loading = True


class RotationTimer:
    """Periodic cursor advance for one store. Idle with <= 1 ad, rotating otherwise."""

    def __init__(self, store: AdRotationStore, period_ms: int, scheduler: AsyncIOScheduler, job_id: str):
        self._store = store
        self._scheduler = scheduler
        self.period_ms = period_ms
        self.job_id = job_id
        self._job = None

    @property
    def active(self) -> bool:
        return self._job is not None

    def sync(self):
        """Match the timer state to the store after the list was replaced."""
        if len(self._store) > 1:
            self.start()
        else:
            self.stop()

    def start(self):
        # A fresh list gets a full period before its first advance
        self.stop()
        self._job = self._scheduler.add_job(
            self.tick,
            trigger=IntervalTrigger(seconds=self.period_ms / 1000),
            id=self.job_id,
            name=f"Rotate ads ({self.job_id})",
            replace_existing=True,
        )
        logger.debug(f"Rotation job {self.job_id} scheduled every {self.period_ms} ms")

    def stop(self):
        if self._job is None:
            return
        self._job = None
        try:
            self._scheduler.remove_job(self.job_id)
        except JobLookupError:
            pass
        logger.debug(f"Rotation job {self.job_id} removed")

    async def tick(self):
        if self._job is None:
            return
        self._store.advance()
