"""
Application settings and configuration
"""
import os
from dotenv import load_dotenv

load_dotenv()

class Settings:
    # Application
    APP_NAME = "SnapitForms API"
    VERSION = "1.0.0"
    DEBUG = os.getenv("DEBUG", "False") == "True"
    API_PREFIX = os.getenv("API_PREFIX", "/api")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Storage: "mongo" for Motor/MongoDB, "memory" for the in-process store
    STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "mongo")

    # Security
    SECRET_KEY = os.getenv("SECRET_KEY", "your-secret-key-change-in-production")
    ALGORITHM = "HS256"
    ACCESS_KEY_PATTERN = r"^sa_[0-9a-f]{32}$"

    # CORS headers sent with every response
    CORS_HEADERS = {
        "Access-Control-Allow-Origin": "*",
        "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
        "Access-Control-Allow-Headers": "Content-Type, Authorization, X-Api-Key, X-Access-Key",
        "Content-Type": "application/json",
    }

    # Pagination
    DEFAULT_PAGE_SIZE = 20
    MAX_PAGE_SIZE = 100

    # Form limits
    MAX_FIELDS_PER_FORM = int(os.getenv("MAX_FIELDS_PER_FORM", "100"))

settings = Settings()
