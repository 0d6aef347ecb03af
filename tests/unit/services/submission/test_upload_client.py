"""Tests for the resume upload client."""

import json
from unittest.mock import MagicMock, patch

import pytest
import requests

from jobboard.errors import UploadError
from jobboard.services.submission.upload_client import (
    ResumeUploadClient,
    parse_upload_response,
    resolve_resume_url,
)


def test_parse_success():
    body = json.dumps({"success": True, "resume_url": "uploads/resumes/J1/a_1.pdf"})
    assert parse_upload_response(200, body) == "uploads/resumes/J1/a_1.pdf"


@pytest.mark.parametrize(
    "status_code, text, message",
    [
        (500, "<html>oops</html>", "Server responded with an error"),
        (400, json.dumps({"error": "No file uploaded or upload error"}), "No file uploaded or upload error"),
        (200, "not json", "Invalid server response format"),
        (200, json.dumps({"error": "Failed to move uploaded file"}), "Failed to move uploaded file"),
        (200, json.dumps({"success": True}), "Unexpected server response"),
        (200, json.dumps(["x"]), "Unexpected server response"),
    ],
)
def test_parse_failures(status_code, text, message):
    with pytest.raises(UploadError) as exc_info:
        parse_upload_response(status_code, text)
    assert exc_info.value.description == message
    assert exc_info.value.title == "Upload Error"


def test_resolve_resume_url():
    assert resolve_resume_url("uploads/a.pdf", "http://host/") == "http://host/uploads/a.pdf"
    assert resolve_resume_url("/uploads/a.pdf", "http://host") == "http://host/uploads/a.pdf"
    assert resolve_resume_url("https://cdn/a.pdf", "http://host") == "https://cdn/a.pdf"


@pytest.mark.asyncio
async def test_upload_posts_multipart_and_resolves_url(pdf_resume):
    response = MagicMock(status_code=200, text=json.dumps({"success": True, "resume_url": "uploads/x.pdf"}))
    client = ResumeUploadClient("http://upload.test/upload", "http://public.test", timeout=5)

    with patch("jobboard.services.submission.upload_client.requests.post", return_value=response) as mock_post:
        url = await client.upload(pdf_resume, "J1001", "Asha Rao")

    assert url == "http://public.test/uploads/x.pdf"
    args, kwargs = mock_post.call_args
    assert args[0] == "http://upload.test/upload"
    assert kwargs["data"] == {"jobId": "J1001", "fullName": "Asha Rao"}
    assert kwargs["files"]["resume"][0] == "asha.pdf"
    assert kwargs["timeout"] == 5


@pytest.mark.asyncio
async def test_network_failure_is_an_upload_error(pdf_resume):
    client = ResumeUploadClient("http://upload.test/upload", "http://public.test")
    with patch(
        "jobboard.services.submission.upload_client.requests.post",
        side_effect=requests.Timeout("timed out"),
    ):
        with pytest.raises(UploadError) as exc_info:
            await client.upload(pdf_resume, "default", "Asha Rao")
    assert exc_info.value.description == "Network or server error occurred"
