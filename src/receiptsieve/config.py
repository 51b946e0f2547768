from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    # App
    APP_NAME: str = "ReceiptSieve"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # CORS
    ALLOWED_ORIGINS: List[str] = ["http://localhost:3000"]

    # Vendor resolution
    HEADER_LINES: int = 10  # Leading lines treated as the receipt header
    VENDOR_MIN_LENGTH: int = 2
    VENDOR_MAX_LENGTH: int = 30

    # Date resolution
    FUTURE_DATE_TOLERANCE_DAYS: int = 1  # Absorbs timezone skew on "today" emails
    DATE_CONTEXT_WINDOW: int = 50  # Characters inspected around a date match
    FALLBACK_DATE_MIN_DAYS: int = 1
    FALLBACK_DATE_MAX_DAYS: int = 7

    # Classification
    RECEIPT_SCORE_THRESHOLD: int = 50
    SENDER_VERIFIED_THRESHOLD: int = 25

    # Deduplication
    DEDUP_CAPACITY: int = 1000
    DEDUP_CLEANUP_THRESHOLD: float = 0.8
    DEDUP_RETENTION_FRACTION: float = 0.6

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
