# pagestreak/config.py
import os

def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")

# --- Database ---
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///pagestreak.db")

# Fix for common SQLAlchemy issues with postgres:// vs postgresql://
if DATABASE_URL.startswith("postgres://"):
    DATABASE_URL = DATABASE_URL.replace("postgres://", "postgresql://", 1)

# --- Reading goals ---
DEFAULT_DAILY_GOAL = int(os.getenv("PAGESTREAK_DEFAULT_DAILY_GOAL", "30"))  # minutes per day

# --- Reminders ---
DEFAULT_REMINDER_HOURS = int(os.getenv("PAGESTREAK_REMINDER_HOURS", "5"))
MIN_REMINDER_SECONDS = int(os.getenv("PAGESTREAK_MIN_REMINDER_SECONDS", "60"))
DEFAULT_REMINDER_TITLE = "Time to read! 📚"
DEFAULT_REMINDER_BODY = "You haven't reached your daily reading goal yet. Keep your streak going!"
DEV_MODE = _env_flag("PAGESTREAK_DEV_MODE")

# --- Logging ---
LOG_LEVEL = os.getenv("PAGESTREAK_LOG_LEVEL", "WARNING")

# --- Open Library ---
OPEN_LIBRARY_URL = os.getenv("OPEN_LIBRARY_URL", "https://openlibrary.org")
OPEN_LIBRARY_COVERS_URL = os.getenv("OPEN_LIBRARY_COVERS_URL", "https://covers.openlibrary.org")
