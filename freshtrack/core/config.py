from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    APP_NAME: str = "FreshTrack API"
    VERSION: str = "1.0.0"
    DEBUG: bool = False

    DATABASE_URL: str = "sqlite:///./freshtrack.db"
    LOG_LEVEL: str = "INFO"

    NOTIFICATION_DAYS_IN_ADVANCE: int = 3
    DAILY_REMINDER_ENABLED: bool = True
    DAILY_REMINDER_TIME: str = "09:00"

    SCHEDULER_ENABLED: bool = True
    ALERT_CHECK_INTERVAL_HOURS: int = 1

    ALLOWED_ORIGINS: List[str] = ["http://localhost", "http://localhost:3000"]

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
