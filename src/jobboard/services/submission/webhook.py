"""Best-effort webhook notification of a submission.

Failures here are logged and never reach the applicant.
"""

import asyncio
import logging
from datetime import datetime
from typing import Dict, Optional, Set

import requests

from ...config import settings
from ...models.application_models import FIELD_LABELS, ApplicationForm
from ...models.job_models import Job
from ...utils import run_blocking

logger = logging.getLogger(__name__)

JOB_APPLICATION_FORM = "Job Application Form"
GENERAL_PROFILE_FORM = "General Profile Submission"


def format_date(now: datetime) -> str:
    return f"{now:%B} {now.day}, {now.year}"


def format_time(now: datetime) -> str:
    hour = now.hour % 12 or 12
    return f"{hour}:{now.minute:02d} {'am' if now.hour < 12 else 'pm'}"


def build_webhook_payload(
    form: ApplicationForm,
    resume_url: str,
    job: Optional[Job],
    job_code: Optional[str],
    is_generic: bool,
    page_url: str = "",
    now: Optional[datetime] = None,
) -> Dict[str, str]:
    """Flatten a submission into human-readable key/value pairs."""
    now = now or datetime.now()
    payload = {label: getattr(form, name) for name, label in FIELD_LABELS.items()}
    payload[FIELD_LABELS["other_department"]] = (
        form.other_department if form.wants_other_department else ""
    )
    payload.update(
        {
            "Upload Resume": resume_url,
            "job_id": job_code or "",
            "job_title": job.title if job else "",
            "Date": format_date(now),
            "Time": format_time(now),
            "Page URL": page_url,
            "form_name": GENERAL_PROFILE_FORM if is_generic else JOB_APPLICATION_FORM,
        }
    )
    return payload


class WebhookNotifier:
    """Posts submission snapshots to a webhook without blocking the caller."""

    def __init__(self, url: Optional[str] = None, timeout: Optional[int] = None):
        self.url = settings.webhook_url if url is None else url
        self.timeout = timeout or settings.request_timeout
        self._pending: Set[asyncio.Task] = set()

    @property
    def enabled(self) -> bool:
        return bool(self.url)

    def _post(self, payload: Dict[str, str]) -> requests.Response:
        # requests url-encodes a dict body as application/x-www-form-urlencoded
        return requests.post(self.url, data=payload, timeout=self.timeout)

    async def send(self, payload: Dict[str, str]) -> None:
        """POST ``payload``; every failure is logged and swallowed."""
        try:
            response = await run_blocking(self._post, payload)
        except Exception as e:
            logger.error(f"Webhook submission error: {str(e)}")
            return
        if response.ok:
            logger.info(f"Webhook submission successful (status {response.status_code})")
        else:
            logger.error(
                f"Webhook submission failed with status {response.status_code}: "
                f"{response.text[:500]}"
            )

    def dispatch(self, payload: Dict[str, str]) -> Optional[asyncio.Task]:
        """Schedule ``send`` on the running loop and return immediately."""
        if not self.enabled:
            logger.debug("No webhook URL configured; skipping notification")
            return None
        task = asyncio.create_task(self.send(payload))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def drain(self) -> None:
        """Wait for every dispatched notification to finish."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
