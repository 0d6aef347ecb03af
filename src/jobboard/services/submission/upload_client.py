"""Client for the resume upload endpoint."""

import json
import logging
from typing import Optional

import requests

from ...config import settings
from ...errors import UploadError
from ...models.application_models import ResumeFile
from ...utils import run_blocking

logger = logging.getLogger(__name__)


def parse_upload_response(status_code: int, text: str) -> str:
    """Return the stored resume path from an upload response body.

    Raises:
        UploadError: For a non-2xx status, a non-JSON body, an ``error`` field,
            or a body without ``success`` and ``resume_url``
    """
    if not 200 <= status_code < 300:
        logger.error("Upload failed with status %s: %s", status_code, text[:500])
        try:
            body = json.loads(text)
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("error"):
            raise UploadError(str(body["error"]))
        raise UploadError("Server responded with an error")

    try:
        data = json.loads(text)
    except ValueError:
        logger.error("Failed to parse upload response as JSON: %s", text[:500])
        raise UploadError("Invalid server response format")

    if not isinstance(data, dict):
        raise UploadError("Unexpected server response")
    if data.get("error"):
        logger.error("Upload error from server: %s", data["error"])
        raise UploadError(str(data["error"]))
    if not data.get("success") or not data.get("resume_url"):
        logger.error("Unexpected upload response format: %s", data)
        raise UploadError("Unexpected server response")
    return str(data["resume_url"])


def resolve_resume_url(resume_url: str, base_url: str) -> str:
    """Make a stored resume path absolute against the public base URL."""
    if resume_url.startswith(("http://", "https://")):
        return resume_url
    return f"{base_url.rstrip('/')}/{resume_url.lstrip('/')}"


class ResumeUploadClient:
    """Sends a resume to the upload endpoint as a multipart form."""

    def __init__(
        self,
        endpoint_url: Optional[str] = None,
        public_base_url: Optional[str] = None,
        timeout: Optional[int] = None,
    ):
        self.endpoint_url = endpoint_url or settings.upload_endpoint_url
        self.public_base_url = public_base_url or settings.public_base_url
        self.timeout = timeout or settings.request_timeout

    def _post(self, resume: ResumeFile, target_id: str, full_name: str) -> requests.Response:
        return requests.post(
            self.endpoint_url,
            files={"resume": (resume.filename, resume.content, resume.content_type)},
            data={"jobId": target_id, "fullName": full_name},
            timeout=self.timeout,
        )

    async def upload(self, resume: ResumeFile, target_id: str, full_name: str) -> str:
        """Upload ``resume`` and return its absolute URL.

        Raises:
            UploadError: On any network or server failure
        """
        logger.info(f"Uploading resume {resume.filename!r} for target {target_id}")
        try:
            response = await run_blocking(self._post, resume, target_id, full_name)
        except requests.RequestException as e:
            logger.error(f"Resume upload error: {str(e)}")
            raise UploadError("Network or server error occurred")

        stored = parse_upload_response(response.status_code, response.text)
        return resolve_resume_url(stored, self.public_base_url)
