"""Application configuration."""
import os
from pathlib import Path

from dotenv import load_dotenv

# Base directory
BASE_DIR = Path(__file__).parent.parent

load_dotenv(BASE_DIR / ".env")

# Data directories
DATA_DIR = BASE_DIR / "data"
DATA_DIR.mkdir(parents=True, exist_ok=True)

# Database configuration (SQLite locally, the hosted Postgres in production)
DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{DATA_DIR}/omninews.db")

# Server configuration
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8000"))

# AI gateway (chat-completion endpoint used by the article generator)
AI_GATEWAY_URL = os.getenv("AI_GATEWAY_URL", "https://ai.gateway.lovable.dev/v1/chat/completions")
AI_MODEL = os.getenv("AI_MODEL", "google/gemini-2.5-flash")
AI_TIMEOUT_SECONDS = float(os.getenv("AI_TIMEOUT_SECONDS", "30"))
AI_MAX_RETRIES = int(os.getenv("AI_MAX_RETRIES", "2"))

# Articles
EXCERPT_MAX_LENGTH = int(os.getenv("EXCERPT_MAX_LENGTH", "150"))
FEED_LIMIT = int(os.getenv("FEED_LIMIT", "12"))
TRENDING_LIMIT = int(os.getenv("TRENDING_LIMIT", "5"))

# Admin credentials (HTTP Basic) for the dashboard write endpoints
ADMIN_USER = os.getenv("ADMIN_USER")
ADMIN_PASS = os.getenv("ADMIN_PASS")

# Log directory
LOG_DIR = DATA_DIR / "logs"
LOG_DIR.mkdir(parents=True, exist_ok=True)
LOG_TIMEZONE = os.getenv("LOG_TIMEZONE", "Asia/Jakarta")


def get_ai_api_key():
    """Return the AI gateway bearer token, read at call time so rotation needs no restart."""
    return os.getenv("AI_GATEWAY_API_KEY")
