import datetime
import json
from unittest.mock import MagicMock, patch

import httpx
import pytest

from cv_intake.models import PersonalInfo
from cv_intake.services.mailer import (
    ACKNOWLEDGEMENT_SUBJECT,
    SmtpMailer,
    build_acknowledgement,
)
from cv_intake.services.sheets import GoogleSheetAppender, build_sheet_row
from cv_intake.services.storage import SupabaseStorage, storage_key
from cv_intake.services.webhook import WebhookNotifier, build_webhook_payload

CANDIDATE = PersonalInfo(name="Jane Doe", email="jane@example.com", phone="555-123-4567")


class TestSheets:
    def test_row_layout(self):
        row = build_sheet_row(
            CANDIDATE,
            "https://files.example.com/cv.pdf",
            ["MIT", "2020"],
            ["Python", "Go"],
            [],
        )

        assert row == [
            "Jane Doe",
            "jane@example.com",
            "555-123-4567",
            "https://files.example.com/cv.pdf",
            "MIT\n2020",
            "Python\nGo",
            "",
        ]

    def test_append_row_calls_values_append(self):
        service = MagicMock()
        appender = GoogleSheetAppender(service, "sheet-123")

        appender.append_row(["a", "b"])

        append = service.spreadsheets.return_value.values.return_value.append
        append.assert_called_once_with(
            spreadsheetId="sheet-123",
            range="Sheet1",
            valueInputOption="RAW",
            body={"values": [["a", "b"]]},
        )
        append.return_value.execute.assert_called_once()


class TestStorage:
    @pytest.mark.parametrize(
        "filename, base_name",
        [("cv.pdf", "cv.pdf"), ("C:\\Users\\me\\cv.docx", "cv.docx"), ("../../etc/cv.pdf", "cv.pdf"), ("", "cv")],
    )
    def test_storage_key_keeps_base_name(self, filename, base_name):
        prefix, name = storage_key(filename).split("/")
        assert name == base_name
        assert len(prefix) == 32

    def test_upload_returns_public_url(self):
        client = MagicMock()
        bucket = client.storage.from_.return_value
        bucket.get_public_url.return_value = "https://proj.supabase.co/storage/v1/object/public/cvs/k/cv.pdf?"

        url = SupabaseStorage(client, "cvs").upload(b"%PDF", "cv.pdf", "application/pdf")

        assert url == "https://proj.supabase.co/storage/v1/object/public/cvs/k/cv.pdf"
        client.storage.from_.assert_called_with("cvs")
        key, content, options = bucket.upload.call_args.args
        assert key.endswith("/cv.pdf")
        assert content == b"%PDF"
        assert options == {"content-type": "application/pdf"}
        bucket.get_public_url.assert_called_once_with(key)


class TestMailer:
    def test_acknowledgement_message(self):
        msg = build_acknowledgement("hr@example.com", "jane@example.com", "Hiring Team")

        assert msg["Subject"] == ACKNOWLEDGEMENT_SUBJECT
        assert msg["To"] == "jane@example.com"
        plain, html = msg.get_payload()
        assert plain.get_content_type() == "text/plain"
        assert html.get_content_type() == "text/html"
        assert "Dear Applicant," in plain.get_payload(decode=True).decode("utf-8")
        assert "<strong>Hiring Team</strong>" in html.get_payload(decode=True).decode("utf-8")

    def test_send_acknowledgement_over_ssl(self):
        mailer = SmtpMailer("smtp.example.com", 465, "hr@example.com", "secret", "Hiring Team")

        with patch("cv_intake.services.mailer.smtplib.SMTP_SSL") as smtp_ssl:
            mailer.send_acknowledgement("jane@example.com")

        smtp_ssl.assert_called_once_with("smtp.example.com", 465, timeout=30.0)
        server = smtp_ssl.return_value.__enter__.return_value
        server.login.assert_called_once_with("hr@example.com", "secret")
        sent = server.send_message.call_args.args[0]
        assert sent["To"] == "jane@example.com"


class TestWebhook:
    def test_payload_shape(self):
        processed_at = datetime.datetime(2024, 5, 1, 12, 0, tzinfo=datetime.timezone.utc)

        payload = build_webhook_payload(
            CANDIDATE, ["MIT"], ["Python"], ["Chat app"], "https://cv", processed_at=processed_at
        ).model_dump()

        assert payload == {
            "cv_data": {
                "personal_info": {
                    "name": "Jane Doe",
                    "email": "jane@example.com",
                    "phone": "555-123-4567",
                },
                "education": ["MIT"],
                "skills": ["Python"],
                "projects": ["Chat app"],
                "cv_public_link": "https://cv",
            },
            "metadata": {
                "applicant_name": "Jane Doe",
                "email": "jane@example.com",
                "status": "prod",
                "cv_processed": True,
                "processed_timestamp": "2024-05-01T12:00:00+00:00",
            },
        }

    @pytest.mark.asyncio
    async def test_send_posts_json_with_candidate_header(self):
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["request"] = request
            return httpx.Response(200, json={"ok": True})

        notifier = WebhookNotifier("https://hooks.example.com/cv", transport=httpx.MockTransport(handler))
        payload = build_webhook_payload(CANDIDATE, [], ["Python"], [], "https://cv")

        delivered = await notifier.send(payload, "jane@example.com")

        request = captured["request"]
        assert delivered is True
        assert request.method == "POST"
        assert str(request.url) == "https://hooks.example.com/cv"
        assert request.headers["X-Candidate-Email"] == "jane@example.com"
        assert request.headers["Content-Type"] == "application/json"
        body = json.loads(request.content)
        assert body["cv_data"]["skills"] == ["Python"]
        assert body["metadata"]["cv_processed"] is True

    @pytest.mark.asyncio
    async def test_send_reports_non_success_status(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(502, text="bad gateway"))
        notifier = WebhookNotifier("https://hooks.example.com/cv", transport=transport)

        delivered = await notifier.send(
            build_webhook_payload(CANDIDATE, [], [], [], ""), "jane@example.com"
        )

        assert delivered is False
