# cv_intake/services/webhook.py
import datetime
import logging
from typing import List, Optional

import httpx

from cv_intake.models import CvData, PersonalInfo, WebhookMetadata, WebhookPayload

logger = logging.getLogger(__name__)


def build_webhook_payload(
    candidate: PersonalInfo,
    education: List[str],
    skills: List[str],
    projects: List[str],
    public_url: str,
    status: str = "prod",
    processed_at: Optional[datetime.datetime] = None,
) -> WebhookPayload:
    processed_at = processed_at or datetime.datetime.now(datetime.timezone.utc)
    return WebhookPayload(
        cv_data=CvData(
            personal_info=candidate,
            education=education,
            skills=skills,
            projects=projects,
            cv_public_link=public_url,
        ),
        metadata=WebhookMetadata(
            applicant_name=candidate.name,
            email=candidate.email,
            status=status,
            cv_processed=True,
            processed_timestamp=processed_at.isoformat(),
        ),
    )


class WebhookNotifier:
    def __init__(
        self,
        url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = url
        self.timeout = timeout
        self._transport = transport

    async def send(self, payload: WebhookPayload, candidate_email: str) -> bool:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            response = await client.post(
                self.url,
                json=payload.model_dump(),
                headers={
                    "Content-Type": "application/json",
                    "X-Candidate-Email": candidate_email,
                },
            )

        if not response.is_success:
            logger.warning(f"Webhook returned {response.status_code}: {response.text[:200]}")
            return False
        return True
