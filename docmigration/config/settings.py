from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    collaborator_provider: str = "google"

    google_access_token: str = ""
    google_user_email: str = ""
    google_sheets_id: str = ""
    sheet_tab_name: str = "ProcessedDocuments"

    drive_api_base_url: str = "https://www.googleapis.com/drive/v3"
    docs_api_base_url: str = "https://docs.googleapis.com/v1"
    sheets_api_base_url: str = "https://sheets.googleapis.com/v4"
    http_timeout_seconds: int = 30
    drive_page_size: int = 100

    require_appointment_date: bool = False
    export_tag: str = "#mass.import"

    state_dir: Path = Path(".")
    state_file: str = "app_state.csv"
