import logging
from typing import Optional

from fastapi import HTTPException
from supabase import create_client, Client

from .config import settings
from .services.entity_tagger import EntityTagger, build_entity_tagger
from .services.field_inference import FieldInferenceEngine
from .services.mailer import SmtpMailer
from .services.sheets import GoogleSheetAppender, build_sheets_service
from .services.storage import SupabaseStorage
from .services.submission import SubmissionService
from .services.webhook import WebhookNotifier

logger = logging.getLogger(__name__)

_supabase_client: Optional[Client] = None
_entity_tagger: Optional[EntityTagger] = None
_entity_tagger_loaded = False
_submission_service: Optional[SubmissionService] = None


def get_supabase_client() -> Optional[Client]:
    global _supabase_client
    if _supabase_client is None:
        if not settings.supabase_url or not settings.supabase_key:
            return None
        try:
            _supabase_client = create_client(settings.supabase_url, settings.supabase_key)
        except Exception as e:
            raise HTTPException(
                status_code=500,
                detail=f"Failed to initialize Supabase client: {str(e)}",
            )
    return _supabase_client


def get_entity_tagger() -> Optional[EntityTagger]:
    global _entity_tagger, _entity_tagger_loaded
    if not _entity_tagger_loaded:
        _entity_tagger = build_entity_tagger(settings.entity_tagger, settings.spacy_model)
        _entity_tagger_loaded = True
    return _entity_tagger


def get_field_inference_engine() -> FieldInferenceEngine:
    return FieldInferenceEngine(tagger=get_entity_tagger())


def get_sheet_appender() -> Optional[GoogleSheetAppender]:
    if not settings.google_sheets_key_file or not settings.google_sheets_spreadsheet_id:
        return None
    try:
        service = build_sheets_service(settings.google_sheets_key_file)
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to initialize Google Sheets client: {str(e)}",
        )
    return GoogleSheetAppender(
        service, settings.google_sheets_spreadsheet_id, settings.google_sheets_range
    )


def get_mailer() -> Optional[SmtpMailer]:
    if not settings.email_user or not settings.email_pass:
        return None
    return SmtpMailer(
        settings.smtp_host,
        settings.smtp_port,
        settings.email_user,
        settings.email_pass,
        settings.mail_sender_name,
    )


def get_submission_service() -> SubmissionService:
    global _submission_service
    if _submission_service is None:
        client = get_supabase_client()
        _submission_service = SubmissionService(
            engine=get_field_inference_engine(),
            storage=SupabaseStorage(client, settings.supabase_bucket) if client else None,
            sheet=get_sheet_appender(),
            mailer=get_mailer(),
            webhook=(
                WebhookNotifier(settings.webhook_url, settings.webhook_timeout)
                if settings.webhook_url
                else None
            ),
            webhook_status=settings.webhook_status,
        )
        service = _submission_service
        logger.info(
            f"Submission service ready (tagger={settings.entity_tagger}, "
            f"storage={service.storage is not None}, sheet={service.sheet is not None}, "
            f"mailer={service.mailer is not None}, webhook={service.webhook is not None})"
        )
    return _submission_service
