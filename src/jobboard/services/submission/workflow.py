"""Application submission workflow.

The workflow is a small state machine::

    EDITING -> VALIDATING -> UPLOADING -> PERSISTING -> SUBMITTED

Every failure returns to EDITING carrying the error. ``transition`` is pure and
returns the effects to run; ``SubmissionWorkflow`` runs them and feeds the
resulting events back in.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from ...config import settings
from ...db.repository import DatabaseError, JobBoardDatabase
from ...errors import InvalidReferenceError, JobBoardError, PersistenceError
from ...models.application_models import Application, GeneralProfile
from ...models.job_models import Job
from ..notices import DEFAULT, DESTRUCTIVE, Notifier
from .form import ApplicationFormState
from .upload_client import ResumeUploadClient
from .validation import validate_submission
from .webhook import WebhookNotifier, build_webhook_payload

logger = logging.getLogger(__name__)

# Upload target used when the form is not tied to a job.
DEFAULT_UPLOAD_TARGET = "default"

APPLICATION_SUBMITTED = (
    "Application Submitted!",
    "Thank you for your application. We'll be in touch soon.",
)
PROFILE_SUBMITTED = (
    "Profile Submitted!",
    "Thank you for submitting your profile. We'll contact you when suitable opportunities arise.",
)
INVALID_JOB_ID = "The job ID provided is not valid or could not be found."


class Phase(str, Enum):
    EDITING = "editing"
    VALIDATING = "validating"
    UPLOADING = "uploading"
    PERSISTING = "persisting"
    SUBMITTED = "submitted"


IN_FLIGHT = (Phase.VALIDATING, Phase.UPLOADING, Phase.PERSISTING)


@dataclass(frozen=True)
class SubmissionState:
    phase: Phase = Phase.EDITING
    error: Optional[JobBoardError] = None
    resume_url: Optional[str] = None


# Events


@dataclass(frozen=True)
class Submit:
    pass


@dataclass(frozen=True)
class Validated:
    pass


@dataclass(frozen=True)
class UploadSucceeded:
    resume_url: str


@dataclass(frozen=True)
class PersistSucceeded:
    generic: bool
    record_id: Optional[str] = None


@dataclass(frozen=True)
class Failed:
    error: JobBoardError


# Effects


@dataclass(frozen=True)
class ValidateForm:
    pass


@dataclass(frozen=True)
class UploadResume:
    pass


@dataclass(frozen=True)
class NotifyWebhook:
    resume_url: str


@dataclass(frozen=True)
class PersistRecord:
    resume_url: str


@dataclass(frozen=True)
class ShowNotice:
    title: str
    description: str
    variant: str = DEFAULT


@dataclass(frozen=True)
class ResetForm:
    pass


@dataclass(frozen=True)
class CloseSurface:
    pass


def transition(state: SubmissionState, event) -> Tuple[SubmissionState, List]:
    """Return the next state and the effects to run for ``event``.

    Events that do not apply to the current phase are ignored.
    """
    phase = state.phase

    if isinstance(event, Submit) and phase in (Phase.EDITING, Phase.SUBMITTED):
        return SubmissionState(Phase.VALIDATING), [ValidateForm()]

    if isinstance(event, Validated) and phase == Phase.VALIDATING:
        return SubmissionState(Phase.UPLOADING), [UploadResume()]

    if isinstance(event, UploadSucceeded) and phase == Phase.UPLOADING:
        return (
            SubmissionState(Phase.PERSISTING, resume_url=event.resume_url),
            [NotifyWebhook(event.resume_url), PersistRecord(event.resume_url)],
        )

    if isinstance(event, PersistSucceeded) and phase == Phase.PERSISTING:
        title, description = PROFILE_SUBMITTED if event.generic else APPLICATION_SUBMITTED
        return (
            SubmissionState(Phase.SUBMITTED, resume_url=state.resume_url),
            [ShowNotice(title, description), ResetForm(), CloseSurface()],
        )

    if isinstance(event, Failed) and phase in IN_FLIGHT:
        error = event.error
        return (
            SubmissionState(Phase.EDITING, error=error),
            [ShowNotice(error.title, error.description, DESTRUCTIVE)],
        )

    logger.debug(f"Ignoring {type(event).__name__} in phase {phase.value}")
    return state, []


class SubmissionWorkflow:
    """Drives one application form from editing to a stored record.

    Args:
        store: Data store receiving the application or general profile
        uploader: Resume upload client
        webhook: Optional best-effort notifier
        notifier: Collects the notices shown to the applicant
        job: The job being applied for, when the form was opened from a job
        job_code: Public job code when no ``job`` object is at hand
        page_url: URL of the page hosting the form, forwarded to the webhook
    """

    def __init__(
        self,
        store: JobBoardDatabase,
        uploader: Optional[ResumeUploadClient] = None,
        webhook: Optional[WebhookNotifier] = None,
        notifier: Optional[Notifier] = None,
        job: Optional[Job] = None,
        job_code: Optional[str] = None,
        page_url: str = "",
        generic_job_id: Optional[str] = None,
        max_resume_bytes: Optional[int] = None,
    ):
        self.store = store
        self.uploader = uploader or ResumeUploadClient()
        self.webhook = webhook
        self.notifier = notifier or Notifier()
        self.job = job
        self.job_code = job.job_code if job is not None else job_code
        self.page_url = page_url
        self.generic_job_id = generic_job_id or settings.generic_job_id
        self.form_state = ApplicationFormState(max_resume_bytes)
        self.state = SubmissionState()
        self.is_open = True
        self.record_id: Optional[str] = None

    @property
    def is_generic(self) -> bool:
        return self.job_code == self.generic_job_id

    @property
    def upload_target(self) -> str:
        return self.job_code or DEFAULT_UPLOAD_TARGET

    async def submit(self) -> SubmissionState:
        """Run the submission to completion or to the first failure."""
        events = [Submit()]
        while events:
            self.state, effects = transition(self.state, events.pop(0))
            for effect in effects:
                follow_up = await self._run(effect)
                if follow_up is not None:
                    events.append(follow_up)
        return self.state

    async def drain_notifications(self) -> None:
        if self.webhook is not None:
            await self.webhook.drain()

    async def _run(self, effect):
        try:
            return await self._perform(effect)
        except JobBoardError as e:
            logger.warning(f"Submission step {type(effect).__name__} failed: {e.description}")
            return Failed(e)
        except Exception:
            logger.exception(f"Unexpected error during {type(effect).__name__}")
            return Failed(
                JobBoardError(
                    "An error occurred while submitting your application. Please try again.",
                    title="Submission Error",
                )
            )

    async def _perform(self, effect):
        if isinstance(effect, ValidateForm):
            validate_submission(self.form_state.fields, self.form_state.resume)
            return Validated()

        if isinstance(effect, UploadResume):
            resume_url = await self.uploader.upload(
                self.form_state.resume, self.upload_target, self.form_state.fields.full_name
            )
            logger.info(f"Resume uploaded to {resume_url}")
            return UploadSucceeded(resume_url)

        if isinstance(effect, NotifyWebhook):
            if self.webhook is not None:
                payload = build_webhook_payload(
                    self.form_state.fields,
                    effect.resume_url,
                    job=self.job,
                    job_code=self.job_code,
                    is_generic=self.is_generic,
                    page_url=self.page_url,
                )
                self.webhook.dispatch(payload)
            return None

        if isinstance(effect, PersistRecord):
            self.record_id = await self._persist(effect.resume_url)
            return PersistSucceeded(self.is_generic, self.record_id)

        if isinstance(effect, ShowNotice):
            self.notifier.notify(effect.title, effect.description, effect.variant)
        elif isinstance(effect, ResetForm):
            self.form_state.reset()
        elif isinstance(effect, CloseSurface):
            self.is_open = False
        return None

    async def _resolve_job_id(self) -> str:
        if not self.job_code:
            raise InvalidReferenceError(INVALID_JOB_ID)
        try:
            rows = await self.store.query("jobs", {"job_code": self.job_code}, limit=1)
        except DatabaseError as e:
            logger.error(f"Error validating job ID {self.job_code}: {e}")
            raise PersistenceError("Could not verify the job ID. Please try again.", title="System Error")
        if not rows:
            raise InvalidReferenceError(INVALID_JOB_ID)
        return rows[0]["id"]

    async def _persist(self, resume_url: str) -> str:
        fields = self.form_state.fields
        if self.is_generic:
            table, kind = "general_profiles", "profile"
            record = GeneralProfile.from_form(fields, resume_url)
        else:
            table, kind = "applications", "application"
            record = Application.from_form(fields, resume_url, job_id=await self._resolve_job_id())

        try:
            row = await self.store.insert(table, record.model_dump(exclude_none=True))
        except DatabaseError as e:
            logger.error(f"Error saving {kind}: {e}")
            raise PersistenceError(f"Failed to save your {kind} details. Please try again.")
        logger.info(f"Stored {kind} {row['id']}", extra={"extra": {"table": table}})
        return row["id"]
