import os
from datetime import date
from pathlib import Path
from dotenv import load_dotenv

DEVELOPMENT_ENV = ".env"
PRODUCTION_ENV = ".env.production"


def _env_path(name: str, default: Path) -> Path:
    """Get an environment variable as a Path. Unset or empty values fall back to the default."""
    raw = (os.getenv(name) or "").strip()
    return Path(raw) if raw else default


def _env_bool(name: str, default: bool) -> bool:
    """Get an environment variable as a boolean. Recognizes '1', 'true', 'yes', 'on' as True and '0', 'false', 'no', 'off' as False. Anything else returns the default."""
    raw = (os.getenv(name) or "").strip().lower()
    if raw in {"1", "true", "yes", "on"}:
        return True
    if raw in {"0", "false", "no", "off"}:
        return False
    return default


def _env_int(name: str, default: int) -> int:
    """Get an environment variable as an integer. If the variable is not set or cannot be converted to an integer, return the default."""
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    """Get an environment variable as a float. If invalid or missing, return the default."""
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_date(name: str, default: date) -> date:
    """Get an environment variable as an ISO date (YYYY-MM-DD). If invalid or missing, return the default."""
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return date.fromisoformat(raw)
    except ValueError:
        return default


class Config:
    BASE_DIR = Path(__file__).resolve().parents[1]  # project root, wherever it is

    load_dotenv(Path(BASE_DIR) / DEVELOPMENT_ENV)

    # ================ Application Settings ================
    DEBUG = _env_bool("TREASURE_HUNT_DEBUG", False)

    # ================ Logging Settings ================
    LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG" if DEBUG else "INFO").upper()
    LOG_DIR = _env_path("LOG_DIR", BASE_DIR / "logs")
    LOG_FILE = _env_path("LOG_FILE", Path("app.log"))
    LOG_TO_FILE = _env_bool("LOG_TO_FILE", True)
    LOG_TO_CONSOLE = _env_bool("LOG_TO_CONSOLE", True)
    LOG_FORMAT = os.getenv("LOG_FORMAT", "%(asctime)s | %(levelname)-7s | %(parent_file)s:%(lineno)-3d | %(message)s")
    LOG_DATEFMT = os.getenv("LOG_DATEFMT", "%Y-%m-%d %H:%M:%S")
    LOG_MAX_BYTES = _env_int("LOG_MAX_BYTES", 10 * 1024 * 1024)  # 10 MB
    LOG_BACKUP_COUNT = _env_int("LOG_BACKUP_COUNT", 5)

    # ================ Challenge Numbering ================
    CHALLENGE_START_DATE = _env_date("CHALLENGE_START_DATE", date(2024, 9, 1))
    CHALLENGE_UTC_OFFSET_HOURS = _env_float("CHALLENGE_UTC_OFFSET_HOURS", -5.0)  # EST

    # ================ Difficulty Tiers ================
    EASY_MIN_POPULATION = _env_int("EASY_MIN_POPULATION", 5_000_000)
    MEDIUM_MIN_POPULATION = _env_int("MEDIUM_MIN_POPULATION", 1_000_000)

    # ================ Dataset Snapshot ================
    DATASET_MAX_AGE_SECONDS = _env_int("DATASET_MAX_AGE_SECONDS", 24 * 60 * 60)


class DevelopmentConfig(Config):
    DEBUG = True
    LOG_LEVEL = "DEBUG"


class TestConfig(Config):
    DEBUG = True
    LOG_LEVEL = "DEBUG"
    LOG_TO_FILE = False  # Keep test runs from writing into logs/


class ProductionConfig(Config):
    DEBUG = False
    LOG_LEVEL = "INFO"
