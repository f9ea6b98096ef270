from cv_intake.models.submission import (
    PersonalInfo,
    ExtractedResume,
    CvData,
    WebhookMetadata,
    WebhookPayload,
    DeliverySteps,
    SubmissionResult,
)

__all__ = [
    "PersonalInfo",
    "ExtractedResume",
    "CvData",
    "WebhookMetadata",
    "WebhookPayload",
    "DeliverySteps",
    "SubmissionResult",
]
