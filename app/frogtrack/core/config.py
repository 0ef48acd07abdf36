from functools import lru_cache
from pydantic import BaseModel
import os


class Settings(BaseModel):
    app_name: str = os.getenv("APP_NAME", "FrogTrack")
    environment: str = os.getenv("ENVIRONMENT", "production")
    database_url: str = os.getenv(
        "DATABASE_URL",
        "postgresql+psycopg2://frogtrack:frogtrack@db:5432/frogtrack",
    )
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "4000"))
    cors_origins: str = os.getenv("CORS_ORIGINS", "*")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    create_tables_on_startup: bool = os.getenv("CREATE_TABLES_ON_STARTUP", "true").lower() == "true"

    record_store: str = os.getenv("RECORD_STORE", "database")
    record_store_path: str = os.getenv("RECORD_STORE_PATH", "/data/frogtrack_certs.json")

    calendar_uid_domain: str = os.getenv("CALENDAR_UID_DOMAIN", "frogtrack")
    csv_export_filename: str = os.getenv("CSV_EXPORT_FILENAME", "frogtrack-certifications.csv")
    ics_export_filename: str = os.getenv("ICS_EXPORT_FILENAME", "frogtrack-renewals.ics")
    csv_include_url: bool = os.getenv("CSV_INCLUDE_URL", "true").lower() == "true"


@lru_cache
def get_settings() -> Settings:
    return Settings()
