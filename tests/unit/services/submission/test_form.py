"""Tests for application form state and validation."""

import pytest

from jobboard.errors import ValidationError
from jobboard.models.application_models import ResumeFile
from jobboard.services.submission.form import ApplicationFormState
from jobboard.services.submission.validation import missing_fields, validate_submission

DOCX_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


def test_png_resume_is_rejected_and_previous_kept(pdf_resume):
    state = ApplicationFormState()
    assert state.select_resume(pdf_resume)

    png = ResumeFile(filename="me.png", content_type="image/png", content=b"\x89PNG")
    assert not state.select_resume(png)

    assert state.file_error == "Please upload a PDF or Word document"
    assert state.resume is pdf_resume


def test_oversized_pdf_sets_size_error():
    state = ApplicationFormState()
    big = ResumeFile(filename="big.pdf", content_type="application/pdf", content=b"0" * (4 * 1024 * 1024))

    assert not state.select_resume(big)
    assert state.file_error == "File size should be less than 3MB"
    assert state.resume is None


def test_word_documents_are_accepted():
    state = ApplicationFormState()
    for name, content_type in (("cv.doc", "application/msword"), ("cv.docx", DOCX_TYPE)):
        assert state.select_resume(ResumeFile(filename=name, content_type=content_type, content=b"x"))
        assert state.file_error is None


def test_clear_resume_and_reset(complete_form, pdf_resume):
    state = ApplicationFormState()
    state.update(**complete_form.model_dump())
    state.select_resume(pdf_resume)

    state.clear_resume()
    assert state.resume is None
    assert state.fields.full_name == "Asha Rao"

    state.reset()
    assert state.fields.full_name == ""


def test_complete_form_validates(complete_form, pdf_resume):
    validate_submission(complete_form, pdf_resume)


@pytest.mark.parametrize("field", ["full_name", "email", "notice_period", "department"])
def test_missing_field_blocks_submission(complete_form, pdf_resume, field):
    form = complete_form.model_copy(update={field: "   "})
    assert missing_fields(form) == [field]
    with pytest.raises(ValidationError) as exc_info:
        validate_submission(form, pdf_resume)
    assert exc_info.value.title == "Missing Information"


def test_other_department_requires_override(complete_form, pdf_resume):
    form = complete_form.model_copy(update={"department": "Other"})
    with pytest.raises(ValidationError) as exc_info:
        validate_submission(form, pdf_resume)
    assert exc_info.value.title == "Missing Information"

    validate_submission(form.model_copy(update={"other_department": "Legal"}), pdf_resume)


def test_resume_is_required(complete_form):
    with pytest.raises(ValidationError) as exc_info:
        validate_submission(complete_form, None)
    assert exc_info.value.title == "Resume Required"
