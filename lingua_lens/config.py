"""
Application Configuration Module.

This module loads environment variables from a .env file and exposes them
as constants for the rest of the application.
"""

import os
from dotenv import load_dotenv

# Load environment variables from a .env file if it exists.
# This is especially useful for local development.
load_dotenv()

# --- Gemini Configuration ---
API_KEY: str | None = os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY")
USE_VERTEXAI: bool = os.getenv("GOOGLE_GENAI_USE_VERTEXAI", "false").lower() in ("1", "true", "yes")
PROJECT_ID: str | None = os.getenv("GOOGLE_CLOUD_PROJECT")
LOCATION: str | None = os.getenv("GOOGLE_CLOUD_LOCATION", "us-central1")

# ============================================================================
# APPLICATION CONSTANTS
# ============================================================================

class GenerationDefaults:
    """Default values for model calls."""
    MODEL = os.getenv("LINGUA_LENS_MODEL", "gemini-2.0-flash")
    TEMPERATURE = float(os.getenv("LINGUA_LENS_TEMPERATURE", "0.2"))


class GeminiLimits:
    """API limits for Gemini."""
    MAX_OUTPUT_TOKENS = 2048


class HistoryDefaults:
    """Constants for the translation history."""
    CAPACITY = 20
    STORAGE_KEY = "linguaLensHistory"


class LanguageDefaults:
    """Defaults for the language selector and speech playback."""
    TARGET_LANGUAGE = "Spanish"
    FALLBACK_LOCALE = "en-US"


class StorageBackends:
    """Supported history storage backends."""
    MEMORY = "memory"
    FILE = "file"
    GCS = "gcs"
    SUPPORTED = {MEMORY, FILE, GCS}


class Config:
    """Settings for the Flask application and its collaborators."""
    SECRET_KEY = os.environ.get("SECRET_KEY") or os.urandom(24)
    STORAGE_BACKEND = os.environ.get("LINGUA_LENS_STORAGE", StorageBackends.FILE)
    HISTORY_FILE = os.environ.get(
        "LINGUA_LENS_HISTORY_FILE",
        os.path.join(os.path.expanduser("~"), ".lingua_lens", "history.json"),
    )
    GCS_BUCKET = os.environ.get("LINGUA_LENS_GCS_BUCKET")
    GCS_PREFIX = os.environ.get("LINGUA_LENS_GCS_PREFIX", "lingua_lens")
