# cv_intake/services/sheets.py
import logging
from typing import List

from google.oauth2 import service_account
from googleapiclient.discovery import Resource, build

from cv_intake.models import PersonalInfo

logger = logging.getLogger(__name__)

# Google Sheets API scopes
SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]


def build_sheet_row(
    candidate: PersonalInfo,
    public_url: str,
    education: List[str],
    skills: List[str],
    projects: List[str],
) -> List[str]:
    """One spreadsheet row: name, email, phone, CV link, then one column per section."""
    return [
        candidate.name,
        candidate.email,
        candidate.phone,
        public_url,
        "\n".join(education),
        "\n".join(skills),
        "\n".join(projects),
    ]


def build_sheets_service(key_file: str) -> Resource:
    credentials = service_account.Credentials.from_service_account_file(
        key_file, scopes=SCOPES
    )
    return build("sheets", "v4", credentials=credentials, cache_discovery=False)


class GoogleSheetAppender:
    def __init__(self, service: Resource, spreadsheet_id: str, sheet_range: str = "Sheet1"):
        self.service = service
        self.spreadsheet_id = spreadsheet_id
        self.sheet_range = sheet_range

    def append_row(self, row: List[str]) -> None:
        self.service.spreadsheets().values().append(
            spreadsheetId=self.spreadsheet_id,
            range=self.sheet_range,
            valueInputOption="RAW",
            body={"values": [row]},
        ).execute()
        logger.info(f"Appended row to spreadsheet {self.spreadsheet_id} ({self.sheet_range})")
