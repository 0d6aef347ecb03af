"""Job listing controller: owns the published job list and its filtered view."""

import logging
from enum import Enum
from typing import List, Optional

from ..config import settings
from ..db.adapters import job_from_row
from ..db.repository import DatabaseError, JobBoardDatabase
from ..models.job_models import FilterCriteria, Industry, Job, JobStatus, Location
from .filtering import Lookups, active_filter_labels, apply_filters
from .notices import DESTRUCTIVE, Notifier

logger = logging.getLogger(__name__)


class ListingState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    LOAD_ERROR = "load_error"


class JobListingController:
    """Fetches published jobs once and re-derives the filtered view locally."""

    def __init__(
        self,
        store: JobBoardDatabase,
        notifier: Optional[Notifier] = None,
        page_size: Optional[int] = None,
    ):
        self.store = store
        self.notifier = notifier or Notifier()
        self.page_increment = page_size or settings.page_size
        self.state = ListingState.IDLE
        self.criteria = FilterCriteria()
        self.lookups = Lookups()
        self.page_size = self.page_increment
        self._all_jobs: List[Job] = []
        self._filtered: List[Job] = []

    async def load(self) -> None:
        """Fetch published jobs; a failure leaves an empty list and a notice."""
        self.state = ListingState.LOADING
        try:
            rows = await self.store.query(
                "jobs",
                {"status": JobStatus.PUBLISHED.value},
                order_by="dateposted",
                descending=True,
            )
            jobs = [job_from_row(row) for row in rows]
        except (DatabaseError, ValueError) as e:
            logger.error(f"Failed to load jobs: {e}")
            self._all_jobs = []
            self._filtered = []
            self.state = ListingState.LOAD_ERROR
            self.notifier.notify(
                "Error loading jobs",
                "Could not load job listings. Please reload the page.",
                DESTRUCTIVE,
            )
            return

        self._all_jobs = [job for job in jobs if job.is_published]
        self.state = ListingState.LOADED
        self._recompute()
        logger.info(f"Loaded {len(self._all_jobs)} published jobs")

    async def load_lookups(self) -> None:
        """Fetch the industry and location detail sets used by the filters."""
        try:
            industries = await self.store.query("industries", order_by="name")
            locations = await self.store.query("locations", order_by="city")
        except DatabaseError as e:
            logger.error(f"Failed to load lookups: {e}")
            self.notifier.notify(
                "Error loading filters",
                "Could not load industries and locations.",
                DESTRUCTIVE,
            )
            return
        self.lookups = Lookups(
            industries=[Industry(id=r["id"], name=r["name"]) for r in industries],
            locations=[Location(id=r["id"], city=r["city"], state=r["state"]) for r in locations],
        )
        self._recompute()

    def _recompute(self) -> None:
        self._filtered = apply_filters(self._all_jobs, self.criteria, self.lookups)

    def update_criteria(self, **changes) -> None:
        """Change one or more filter criteria and reset pagination."""
        self.criteria = self.criteria.model_copy(update=changes)
        self.page_size = self.page_increment
        self._recompute()

    def clear_filters(self) -> None:
        self.criteria = self.criteria.cleared()
        self.page_size = self.page_increment
        self._recompute()

    def load_more(self) -> None:
        self.page_size += self.page_increment

    def show_pages(self, pages: int) -> None:
        """Same view as ``pages - 1`` calls to load_more, capped once every filtered job shows."""
        needed = max(1, -(-len(self._filtered) // self.page_increment))
        self.page_size = self.page_increment * max(1, min(pages, needed))

    @property
    def visible_jobs(self) -> List[Job]:
        if self.state != ListingState.LOADED:
            return []
        return self._filtered[: self.page_size]

    @property
    def total_count(self) -> int:
        return len(self._filtered)

    @property
    def showing_count(self) -> int:
        return len(self.visible_jobs)

    @property
    def has_more(self) -> bool:
        return self.page_size < len(self._filtered)

    @property
    def active_filters(self) -> List[str]:
        return active_filter_labels(self.criteria, self.lookups)

    def find(self, job_code: str) -> Optional[Job]:
        return next((job for job in self._all_jobs if job.job_code == job_code), None)
