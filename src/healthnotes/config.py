from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Home Assistant sensor
    instance_uri: str = ""
    token: str = ""
    sensor: str = "health_connect"
    request_timeout: float = 30.0

    # Vault layout
    vault_path: str = "."
    daily_note_folder: str = ""
    daily_note_format: str = "%Y-%m-%d"
    daily_note_template: Optional[str] = None
    create_daily_notes: bool = True
    table_subfolder: str = "Health"
    timezone: str = "UTC"
    time_format_24h: bool = True

    # Front-matter fields (empty string disables the field)
    calorie_field: str = "active_calories"
    exercise_field: str = "exercise_minutes"
    hydration_field: str = "hydration_ml"
    steps_field: str = "steps"
    weight_field: str = "weight"
    sleep_field: str = "sleep_minutes"

    # Section headings (empty string disables the section)
    exercise_section: str = "Exercise"
    heart_rate_section: str = "Heart Rate"
    oxygen_section: str = "Blood Oxygen"
    summary_section: str = ""

    refresh_interval_minutes: int = 0
    database_url: str = "sqlite:///./healthnotes.db"

    telegram_bot_token: str = ""
    telegram_chat_id: Optional[int] = None
    notify_on_success: bool = False

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        env_prefix = "HEALTHNOTES_"


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
