# cv_intake/models/submission.py
from pydantic import BaseModel, Field
from typing import List, Optional


class PersonalInfo(BaseModel):
    name: str = ""
    email: str = ""
    phone: str = ""


class ExtractedResume(BaseModel):
    personal_info: PersonalInfo = Field(default_factory=PersonalInfo)
    education: List[str] = []
    skills: List[str] = []
    projects: List[str] = []


class CvData(BaseModel):
    personal_info: PersonalInfo
    education: List[str] = []
    skills: List[str] = []
    projects: List[str] = []
    cv_public_link: str = ""


class WebhookMetadata(BaseModel):
    applicant_name: str = ""
    email: str = ""
    status: str = "prod"
    cv_processed: bool = True
    processed_timestamp: str  # ISO-8601, UTC


class WebhookPayload(BaseModel):
    cv_data: CvData
    metadata: WebhookMetadata


class DeliverySteps(BaseModel):
    stored: bool = False
    sheet_appended: bool = False
    email_sent: bool = False
    webhook_delivered: bool = False


class SubmissionResult(BaseModel):
    message: str = "Application submitted successfully!"
    candidate: PersonalInfo
    education: List[str] = []
    skills: List[str] = []
    projects: List[str] = []
    cv_public_link: Optional[str] = None
    steps: DeliverySteps = Field(default_factory=DeliverySteps)
