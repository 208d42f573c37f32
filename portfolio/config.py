from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env if present
ENV_PATH = Path(__file__).resolve().parents[1] / ".env"
if ENV_PATH.exists():
    load_dotenv(ENV_PATH)


class Config:
    SECRET_KEY: str = os.getenv("SECRET_KEY", os.urandom(32).hex())

    SITE_NAME = os.getenv("SITE_NAME", "Portfolio")
    # Absolute base used for permalinks and media URLs
    SITE_URL: str = os.getenv("SITE_URL", "http://localhost:8000").rstrip("/")

    # REST boundary: routes live under /<API_NAMESPACE>/case-studies
    API_NAMESPACE: str = os.getenv("API_NAMESPACE", "portfolio/v1").strip("/")
    PERMALINK_BASE: str = os.getenv("PERMALINK_BASE", "portafolio").strip("/")
    EXCERPT_WORDS: int = int(os.getenv("EXCERPT_WORDS", "30"))

    # Database
    # Read from environment and then unset for security
    SQLALCHEMY_DATABASE_URI: str = os.environ.pop("DATABASE_URL", "sqlite:///portfolio.db")
    SQLALCHEMY_TRACK_MODIFICATIONS: bool = False

    # Uploads and limits
    MAX_CONTENT_LENGTH = int(os.getenv("MAX_CONTENT_LENGTH", str(5 * 1024 * 1024)))
    MEDIA_UPLOAD_SUBDIR = os.getenv("MEDIA_UPLOAD_SUBDIR", "uploads/case-studies")

    # Rate limiting
    RATELIMIT_DEFAULT = os.getenv("RATELIMIT_DEFAULT", "100 per minute")
    RATELIMIT_STORAGE_URI = os.getenv("RATELIMIT_STORAGE_URI", "memory://")

    # Security headers (JSON API only, nothing to script or frame)
    SECURITY_CSP = "default-src 'none'; frame-ancestors 'none'; base-uri 'none'"
    SECURITY_HSTS_SECONDS = 31536000
    SECURITY_PERMISSIONS_POLICY = (
        "geolocation=(), microphone=(), camera=(), payment=(), usb=(), "
        "magnetometer=(), gyroscope=()"
    )

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    # Flask env
    ENV = os.getenv("FLASK_ENV", "production")
    DEBUG = ENV != "production"
