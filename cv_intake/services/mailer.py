# cv_intake/services/mailer.py
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

logger = logging.getLogger(__name__)

ACKNOWLEDGEMENT_SUBJECT = "Application Received – Your CV is Under Review"

_TEXT_TEMPLATE = """Dear {recipient_name},

Thank you for submitting your application. We have successfully received your CV and our team is currently reviewing your qualifications.

We will get back to you soon regarding the next steps. If you have any questions, feel free to reply to this email.

Best regards,
{sender_name}
"""

_HTML_TEMPLATE = """<p>Dear {recipient_name},</p>
<p>Thank you for submitting your application. We have successfully received your CV and our team is currently reviewing your qualifications.</p>
<p>We will get back to you soon regarding the next steps. If you have any questions, feel free to reply to this email.</p>
<br>
<p>Best regards,</p>
<p><strong>{sender_name}</strong></p>
"""


def build_acknowledgement(
    sender: str, to_email: str, sender_name: str, recipient_name: str = "Applicant"
) -> MIMEMultipart:
    msg = MIMEMultipart("alternative")
    msg["From"] = sender
    msg["To"] = to_email
    msg["Subject"] = ACKNOWLEDGEMENT_SUBJECT
    fields = {"recipient_name": recipient_name, "sender_name": sender_name}
    msg.attach(MIMEText(_TEXT_TEMPLATE.format(**fields), "plain", "utf-8"))
    msg.attach(MIMEText(_HTML_TEMPLATE.format(**fields), "html", "utf-8"))
    return msg


class SmtpMailer:
    def __init__(
        self,
        host: str,
        port: int,
        username: str,
        password: str,
        sender_name: str,
        timeout: float = 30.0,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.sender_name = sender_name
        self.timeout = timeout

    def send_acknowledgement(self, to_email: str) -> None:
        msg = build_acknowledgement(self.username, to_email, self.sender_name)
        with smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout) as server:
            server.login(self.username, self.password)
            server.send_message(msg)
        logger.info(f"Acknowledgement email sent to {to_email}")
