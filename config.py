import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

ROOT_DIR = Path(__file__).resolve().parent


def _env_bool(name, default=False):
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


# -------------------------------------------------
# App identity
# -------------------------------------------------

APP_NAME = "GCET Academic Assistant"
FLASK_SECRET_KEY = os.getenv("FLASK_SECRET_KEY", "dev-secret")

# -------------------------------------------------
# Local storage
# -------------------------------------------------

DB_PATH = Path(os.getenv("ASSISTANT_DB_PATH", str(ROOT_DIR / "data" / "assistant.db")))

# -------------------------------------------------
# Remote services
# -------------------------------------------------

# Bounded wait for every outbound call (query service and Gemini).
REQUEST_TIMEOUT_SECONDS = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "10"))

QUERY_SERVICE_URL = os.getenv("QUERY_SERVICE_URL", "").strip()

GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", "").strip()
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "models/gemini-2.5-flash")
GEMINI_TEMPERATURE = float(os.getenv("GEMINI_TEMPERATURE", "0.7"))
GEMINI_TOP_P = float(os.getenv("GEMINI_TOP_P", "0.9"))
GEMINI_MAX_OUTPUT_TOKENS = int(os.getenv("GEMINI_MAX_OUTPUT_TOKENS", "800"))

# -------------------------------------------------
# Client capabilities
# -------------------------------------------------

VOICE_ENABLED = _env_bool("VOICE_ENABLED", default=True)
