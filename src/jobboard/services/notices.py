"""User-visible notifications raised by the job board workflows."""

import logging
from dataclasses import dataclass
from typing import List, Optional

from ..errors import JobBoardError

logger = logging.getLogger(__name__)

DEFAULT = "default"
DESTRUCTIVE = "destructive"


@dataclass(frozen=True)
class Notice:
    title: str
    description: str
    variant: str = DEFAULT

    @property
    def is_error(self) -> bool:
        return self.variant == DESTRUCTIVE


class Notifier:
    """Collects the notices a workflow shows to its user."""

    def __init__(self):
        self.notices: List[Notice] = []

    def notify(self, title: str, description: str, variant: str = DEFAULT) -> Notice:
        notice = Notice(title=title, description=description, variant=variant)
        self.notices.append(notice)
        log = logger.warning if notice.is_error else logger.info
        log("Notice: %s - %s", title, description)
        return notice

    def error(self, exc: JobBoardError) -> Notice:
        return self.notify(exc.title, exc.description, DESTRUCTIVE)

    @property
    def last(self) -> Optional[Notice]:
        return self.notices[-1] if self.notices else None
