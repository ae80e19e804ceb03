"""
Configuration settings for the application
"""

import os
from typing import List
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    """Application settings"""

    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./sdgclub.db")

    # Security
    SESSION_TTL_HOURS: int = int(os.getenv("SESSION_TTL_HOURS", "72"))
    BOOTSTRAP_ADMIN_EMAILS: List[str] = []
    QR_SIGNING_SECRET: str | None = os.getenv("QR_SIGNING_SECRET")

    # Application
    BASE_URL: str = os.getenv("BASE_URL", "http://localhost:8000")
    ORGANIZATION_NAME: str = "ASAC SDG Advocacy Club"
    QR_PAYLOAD_TYPE: str = "ahsac_member"
    REGISTRATION_REQUIRES_LINK: bool = os.getenv("REGISTRATION_REQUIRES_LINK", "false").lower() in ("1", "true", "yes")

    # Outbound email (contact form)
    SMTP_HOST: str | None = os.getenv("SMTP_HOST")
    SMTP_PORT: int = int(os.getenv("SMTP_PORT", "587"))
    SMTP_USERNAME: str | None = os.getenv("SMTP_USERNAME")
    SMTP_PASSWORD: str | None = os.getenv("SMTP_PASSWORD")
    SMTP_SENDER: str = os.getenv("SMTP_SENDER", "no-reply@asac-hui.org")
    CONTACT_RECIPIENT: str = os.getenv("CONTACT_RECIPIENT", "info@asac-hui.org")

    # CORS
    ALLOW_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://localhost:8080",
        "https://asac-hui.vercel.app",
    ]

    # File limits
    MAX_UPLOAD_SIZE: int = 5 * 1024 * 1024  # 5MB

    # Rate limiting
    RATE_LIMIT_PER_MINUTE: int = 30

    class Config:
        env_file = ".env"

settings = Settings()
