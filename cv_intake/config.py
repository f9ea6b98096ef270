from pydantic_settings import BaseSettings
from dotenv import load_dotenv

load_dotenv()


class Settings(BaseSettings):
    # Object storage (Supabase Storage)
    supabase_url: str = ""
    supabase_key: str = ""
    supabase_bucket: str = "cvs"

    # Google Sheets
    google_sheets_key_file: str = ""
    google_sheets_spreadsheet_id: str = ""
    google_sheets_range: str = "Sheet1"

    # Acknowledgement mail
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 465
    email_user: str = ""
    email_pass: str = ""
    mail_sender_name: str = "The Recruitment Team"

    # Downstream webhook
    webhook_url: str = ""
    webhook_status: str = "prod"
    webhook_timeout: float = 10.0

    # Field inference: "spacy", "nltk" or "none"
    entity_tagger: str = "spacy"
    spacy_model: str = "en_core_web_sm"

    cors_origin: str = "*"
    log_level: str = "INFO"
    port: int = 5001

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


settings = Settings()
