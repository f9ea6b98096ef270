import pytest

from cv_intake.models import PersonalInfo
from cv_intake.services.field_inference import FieldInferenceEngine
from cv_intake.services.submission import SubmissionService, merge_candidate
from cv_intake.services.text_extractor import UnsupportedFormatError
from tests.doubles import (
    FakeMailer,
    FakeSheet,
    FakeStorage,
    FakeWebhook,
    RaisingWebhook,
    make_docx,
)

CV_LINES = [
    "Name: Jane Doe",
    "Email: jane.doe@example.com",
    "Skills",
    "Python",
    "Go",
    "Projects",
    "Chat app",
]


def make_service(**overrides):
    collaborators = {
        "storage": FakeStorage(),
        "sheet": FakeSheet(),
        "mailer": FakeMailer(),
        "webhook": FakeWebhook(),
    }
    collaborators.update(overrides)
    return SubmissionService(engine=FieldInferenceEngine(), **collaborators)


def test_merge_prefers_extracted_values():
    extracted = PersonalInfo(name="Jane Doe", email="", phone="  ")

    merged = merge_candidate(extracted, "Form Name", "form@example.com", "555-000-1111")

    assert merged == PersonalInfo(
        name="Jane Doe", email="form@example.com", phone="555-000-1111"
    )


@pytest.mark.asyncio
async def test_full_submission():
    service = make_service()
    content = make_docx(CV_LINES)

    result = await service.submit(
        content,
        "jane.docx",
        name="Form Name",
        email="form@example.com",
        phone="555-000-1111",
    )

    assert result.message == "Application submitted successfully!"
    assert result.candidate == PersonalInfo(
        name="Jane Doe", email="jane.doe@example.com", phone="555-000-1111"
    )
    assert result.skills == ["Python", "Go"]
    assert result.projects == ["Chat app"]
    assert result.education == []
    assert result.cv_public_link == service.storage.url
    assert result.steps.stored and result.steps.sheet_appended
    assert result.steps.email_sent and result.steps.webhook_delivered

    _, filename, content_type = service.storage.uploads[0]
    assert filename == "jane.docx"
    assert content_type.endswith("wordprocessingml.document")

    assert service.sheet.rows == [
        [
            "Jane Doe",
            "jane.doe@example.com",
            "555-000-1111",
            service.storage.url,
            "",
            "Python\nGo",
            "Chat app",
        ]
    ]
    # The acknowledgement goes to the address typed into the form.
    assert service.mailer.sent_to == ["form@example.com"]

    payload, candidate_email = service.webhook.calls[0]
    assert candidate_email == "form@example.com"
    assert payload.cv_data.personal_info.name == "Jane Doe"
    assert payload.cv_data.cv_public_link == service.storage.url
    assert payload.metadata.applicant_name == "Jane Doe"


@pytest.mark.asyncio
async def test_extracted_email_used_when_form_email_blank():
    service = make_service()

    await service.submit(make_docx(CV_LINES), "cv.docx", email="  ")

    assert service.mailer.sent_to == ["jane.doe@example.com"]
    assert service.webhook.calls[0][1] == "jane.doe@example.com"


@pytest.mark.asyncio
async def test_unsupported_extension_is_rejected_before_any_step():
    service = make_service()

    with pytest.raises(UnsupportedFormatError):
        await service.submit(b"hello", "cv.txt", email="jane@example.com")

    assert service.storage.uploads == []
    assert service.sheet.rows == []
    assert service.mailer.sent_to == []


@pytest.mark.asyncio
async def test_unreadable_document_falls_back_to_form_fields():
    service = make_service()

    result = await service.submit(
        b"%PDF-1.7 garbage",
        "cv.pdf",
        name="Jane Doe",
        email="jane@example.com",
        phone="555-123-4567",
    )

    assert result.candidate == PersonalInfo(
        name="Jane Doe", email="jane@example.com", phone="555-123-4567"
    )
    assert result.education == result.skills == result.projects == []
    assert service.sheet.rows[0][:3] == ["Jane Doe", "jane@example.com", "555-123-4567"]


@pytest.mark.asyncio
async def test_unreadable_document_without_form_fields_stores_empty_row():
    service = make_service()

    result = await service.submit(b"not a docx", "cv.docx")

    assert result.candidate == PersonalInfo()
    assert service.sheet.rows == [["", "", "", service.storage.url, "", "", ""]]
    assert service.mailer.sent_to == []
    assert result.steps.email_sent is False


@pytest.mark.asyncio
async def test_failing_steps_do_not_stop_later_steps():
    service = make_service(storage=FakeStorage(fail=True), sheet=FakeSheet(fail=True))

    result = await service.submit(make_docx(CV_LINES), "cv.docx", email="jane@example.com")

    assert result.steps.stored is False
    assert result.steps.sheet_appended is False
    assert result.cv_public_link == ""
    assert result.steps.email_sent is True
    assert result.steps.webhook_delivered is True
    assert service.webhook.calls[0][0].cv_data.cv_public_link == ""


@pytest.mark.asyncio
async def test_webhook_rejection_is_reported():
    service = make_service(webhook=FakeWebhook(ok=False), mailer=FakeMailer(fail=True))

    result = await service.submit(make_docx(CV_LINES), "cv.docx")

    assert result.steps.email_sent is False
    assert result.steps.webhook_delivered is False
    assert result.steps.stored is True


@pytest.mark.asyncio
async def test_raising_webhook_does_not_fail_the_submission():
    service = make_service(webhook=RaisingWebhook())

    result = await service.submit(make_docx(CV_LINES), "cv.docx", email="jane@example.com")

    assert result.message == "Application submitted successfully!"
    assert len(service.webhook.calls) == 1
    assert result.steps.webhook_delivered is False
    assert result.steps.stored and result.steps.sheet_appended and result.steps.email_sent


@pytest.mark.asyncio
async def test_unconfigured_collaborators_are_skipped():
    service = SubmissionService(engine=FieldInferenceEngine())

    result = await service.submit(make_docx(CV_LINES), "cv.docx", email="jane@example.com")

    assert result.candidate.name == "Jane Doe"
    assert result.cv_public_link == ""
    assert not any(result.steps.model_dump().values())
