"""Application submission: form state, validation, upload, webhook and persistence."""

from .form import ApplicationFormState
from .upload_client import ResumeUploadClient
from .webhook import WebhookNotifier, build_webhook_payload
from .workflow import Phase, SubmissionState, SubmissionWorkflow, transition

__all__ = [
    "ApplicationFormState",
    "Phase",
    "ResumeUploadClient",
    "SubmissionState",
    "SubmissionWorkflow",
    "WebhookNotifier",
    "build_webhook_payload",
    "transition",
]
