# cv_intake/services/submission.py
import asyncio
import logging
from typing import Any, Callable, Optional, Tuple

from cv_intake.constants import ACCEPTED_EXTENSIONS, CONTENT_TYPES
from cv_intake.models import ExtractedResume, PersonalInfo, SubmissionResult
from cv_intake.services.field_inference import FieldInferenceEngine
from cv_intake.services.mailer import SmtpMailer
from cv_intake.services.sheets import GoogleSheetAppender, build_sheet_row
from cv_intake.services.storage import SupabaseStorage
from cv_intake.services.text_extractor import (
    UnsupportedFormatError,
    extract_text,
    file_extension,
)
from cv_intake.services.webhook import WebhookNotifier, build_webhook_payload
from cv_intake.utils import prefer

logger = logging.getLogger(__name__)


def merge_candidate(extracted: PersonalInfo, name: str, email: str, phone: str) -> PersonalInfo:
    """Extracted fields win whenever they are non-empty; the form fills the gaps."""
    return PersonalInfo(
        name=prefer(extracted.name, name),
        email=prefer(extracted.email, email),
        phone=prefer(extracted.phone, phone),
    )


async def _blocking_step(step: str, func: Callable[..., Any], *args) -> Tuple[bool, Any]:
    try:
        return True, await asyncio.to_thread(func, *args)
    except Exception:
        logger.exception(f"Submission step '{step}' failed")
        return False, None


class SubmissionService:
    """
    Runs one CV submission: text extraction, field inference, then storage,
    spreadsheet, acknowledgement mail and webhook, in that order.

    Every collaborator is optional; a missing one is skipped. A failing one is
    logged and does not stop the steps after it.
    """

    def __init__(
        self,
        engine: FieldInferenceEngine,
        storage: Optional[SupabaseStorage] = None,
        sheet: Optional[GoogleSheetAppender] = None,
        mailer: Optional[SmtpMailer] = None,
        webhook: Optional[WebhookNotifier] = None,
        webhook_status: str = "prod",
    ):
        self.engine = engine
        self.storage = storage
        self.sheet = sheet
        self.mailer = mailer
        self.webhook = webhook
        self.webhook_status = webhook_status

    def analyze(self, content: bytes, extension: str) -> ExtractedResume:
        text = extract_text(content, extension)
        if not text.strip():
            logger.warning("No text extracted from the CV; relying on form fields only.")
        return self.engine.infer(text)

    async def submit(
        self,
        content: bytes,
        filename: str,
        content_type: Optional[str] = None,
        name: str = "",
        email: str = "",
        phone: str = "",
    ) -> SubmissionResult:
        extension = file_extension(filename)
        if extension not in ACCEPTED_EXTENSIONS:
            raise UnsupportedFormatError(extension)

        extracted = await asyncio.to_thread(self.analyze, content, extension)
        candidate = merge_candidate(extracted.personal_info, name, email, phone)
        result = SubmissionResult(
            candidate=candidate,
            education=extracted.education,
            skills=extracted.skills,
            projects=extracted.projects,
        )

        public_url = ""
        if self.storage is None:
            logger.warning("Object storage not configured; CV file is not stored.")
        else:
            stored, url = await _blocking_step(
                "storage",
                self.storage.upload,
                content,
                filename,
                content_type or CONTENT_TYPES[extension],
            )
            result.steps.stored = stored
            public_url = url or ""
        result.cv_public_link = public_url

        if self.sheet is None:
            logger.warning("Spreadsheet not configured; skipping row append.")
        else:
            row = build_sheet_row(
                candidate, public_url, extracted.education, extracted.skills, extracted.projects
            )
            result.steps.sheet_appended, _ = await _blocking_step(
                "spreadsheet", self.sheet.append_row, row
            )

        recipient = prefer(email, candidate.email)
        if self.mailer is None:
            logger.warning("Mail transport not configured; skipping acknowledgement.")
        elif not recipient:
            logger.warning("No email address for the applicant; skipping acknowledgement.")
        else:
            result.steps.email_sent, _ = await _blocking_step(
                "email", self.mailer.send_acknowledgement, recipient
            )

        if self.webhook is None:
            logger.warning("Webhook URL not configured; skipping notification.")
        else:
            payload = build_webhook_payload(
                candidate,
                extracted.education,
                extracted.skills,
                extracted.projects,
                public_url,
                status=self.webhook_status,
            )
            try:
                result.steps.webhook_delivered = await self.webhook.send(payload, recipient)
            except Exception:
                logger.exception("Submission step 'webhook' failed")

        return result
