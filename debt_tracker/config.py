import logging
import os
from typing import Optional

from dotenv import load_dotenv

# Load environment variables (API key, store location) from a local .env
load_dotenv()

DEFAULT_MODEL = "gemini-3-flash-preview"
DEFAULT_STORE_PATH = "data/debt_tracker.json"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def default_api_key() -> Optional[str]:
    """Process-level Gemini key: GEMINI_API_KEY first, then API_KEY."""
    return os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY") or None


def model_name() -> str:
    return os.getenv("GEMINI_MODEL", DEFAULT_MODEL)


def store_path() -> str:
    return os.getenv("DEBT_TRACKER_STORE", DEFAULT_STORE_PATH)


def configure_logging() -> None:
    level = os.getenv("DEBT_TRACKER_LOG_LEVEL", "INFO").upper()
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)
