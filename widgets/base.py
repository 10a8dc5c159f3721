"""
Ad Panel Abstraction Layer
Shared lifecycle for the rotating medicine ad panels (side panel, bottom strip).
"""

import asyncio
import logging
import webbrowser
from abc import ABC, abstractmethod
from typing import Callable, List, Optional, Set, Tuple

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from pydantic import BaseModel

from schemas import Ad
from services.error_monitoring import capture_exception
from widgets.client import AdsApiClient, FetchResult
from widgets.defaults import PLACEHOLDER_LINK
from widgets.rotation import AdRotationStore, RotationTimer, get_rotation_scheduler, release_rotation_scheduler

logger = logging.getLogger(__name__)

AD_FETCH_LIMIT = 10


class AdCardView(BaseModel):
    """What a panel draws for the current ad."""
    ad_id: str
    heading: str
    initial: str
    image_url: Optional[str] = None
    badge: Optional[str] = None
    conditions: List[str] = []
    more_conditions: int = 0
    category: Optional[str] = None
    description: Optional[str] = None
    show_divider: bool = False
    link: Optional[str] = None
    dots: List[bool] = []
    sponsored: bool = False


class PanelView(BaseModel):
    loading: bool = False
    card: Optional[AdCardView] = None


class AdPanelBase(ABC):
    """Abstract base class for ad panels"""

    ROTATION_PERIOD_MS: int = 5000

    def __init__(
        self,
        client: AdsApiClient,
        scheduler: Optional[AsyncIOScheduler] = None,
        opener: Optional[Callable[[str], object]] = None,
    ):
        self._client = client
        self._scheduler = scheduler
        self._opener = opener or webbrowser.open_new_tab
        self.store = AdRotationStore()
        self._timer: Optional[RotationTimer] = None
        self._generation = 0
        self._mounted = False
        self._pending_clicks: Set[asyncio.Task] = set()
        self._shares_scheduler = False

    @property
    @abstractmethod
    def name(self) -> str:
        """Panel name, e.g. 'side-panel' or 'bottom-panel'"""
        ...

    @abstractmethod
    def query(self) -> Tuple[str, Optional[bool]]:
        """(target audience, is-new-medicine filter or None) for the ads request."""
        ...

    @abstractmethod
    def default_ads(self) -> List[Ad]:
        """Fallback list for this panel, used when the fetch yields nothing."""
        ...

    @abstractmethod
    def build_card(self, ad: Ad) -> AdCardView:
        ...

    @property
    def mounted(self) -> bool:
        return self._mounted

    @property
    def rotating(self) -> bool:
        return self._timer is not None and self._timer.active

    @property
    def job_id(self) -> str:
        return f"{self.name}-rotation-{id(self):x}"

    async def __aenter__(self):
        await self.mount()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.unmount()

    # ── lifecycle ───────────────────────────────────────────
    async def mount(self):
        if self._mounted:
            return
        scheduler = self._scheduler or get_rotation_scheduler()
        self._shares_scheduler = self._scheduler is None
        self._timer = RotationTimer(self.store, self.ROTATION_PERIOD_MS, scheduler, self.job_id)
        self._mounted = True
        await self.refresh()

    def unmount(self):
        if not self._mounted:
            return
        self._mounted = False
        # Invalidate any fetch still in flight
        self._generation += 1
        if self._timer:
            self._timer.stop()
        self.store.clear()
        if self._shares_scheduler:
            self._shares_scheduler = False
            release_rotation_scheduler()

    async def refresh(self):
        """Fetch ads and swap them in, falling back to the defaults."""
        if not self._mounted:
            return
        self._generation += 1
        generation = self._generation

        target_audience, is_new_medicine = self.query()
        result = await self._client.try_fetch_ads(
            target_audience, is_new_medicine=is_new_medicine, limit=AD_FETCH_LIMIT
        )

        if generation != self._generation or not self._mounted:
            logger.debug(f"{self.name}: discarding stale ads response (generation {generation})")
            return

        self.store.replace(self._resolve(result))
        self._timer.sync()

    def _resolve(self, result: FetchResult) -> List[Ad]:
        if result.ok and result.ads:
            return result.ads
        if result.ok:
            logger.info(f"ℹ️ {self.name}: no ads returned, showing defaults")
        else:
            logger.warning(f"⚠️ {self.name}: ads fetch failed, showing defaults: {result.error}")
        return self.default_ads()

    # ── interaction ─────────────────────────────────────────
    def select(self, index: int):
        """Indicator dot click. Leaves the rotation timer running."""
        self.store.select(index)

    async def click(self) -> Optional[asyncio.Task]:
        """Track a click on the current ad and open its link if it has a real one."""
        ad = self.store.current
        if ad is None:
            return None

        task = asyncio.create_task(self._track_click(ad.id))
        self._pending_clicks.add(task)
        task.add_done_callback(self._pending_clicks.discard)

        if ad.link and ad.link != PLACEHOLDER_LINK:
            self._opener(ad.link)
        return task

    async def _track_click(self, ad_id: str):
        try:
            await self._client.track_click(ad_id)
        except Exception as e:
            # Nobody awaits this task; tracking failures never reach the caller
            capture_exception(e, {"panel": self.name, "ad_id": ad_id})

    # ── rendering ───────────────────────────────────────────
    def dots(self) -> List[bool]:
        if len(self.store) <= 1:
            return []
        return [i == self.store.index for i in range(len(self.store))]

    def render(self) -> Optional[PanelView]:
        if not self._mounted:
            return None
        if self.store.loading:
            return PanelView(loading=True)
        ad = self.store.current
        if ad is None:
            return None
        return PanelView(card=self.build_card(ad))
