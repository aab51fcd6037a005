"""
Configuration constants and environment setup.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# =============================================================================
# PATHS
# =============================================================================

PROJECT_ROOT = Path(__file__).parent.parent.parent
DATA_DIR = PROJECT_ROOT / ".data"
AUDIT_DIR = DATA_DIR / "calendar-audit"
CLIENTS_PATH = PROJECT_ROOT / "clients.json"
CLIENTS_EXAMPLE_PATH = PROJECT_ROOT / "clients.example.json"
DEFAULT_CSV_OUT = PROJECT_ROOT / "calendar-hours.csv"
DEFAULT_JSON_OUT = PROJECT_ROOT / "calendar-hours.json"
DB_PATH = PROJECT_ROOT / "data" / "db" / "calendar-audit.db"

# .env.local wins over .env when both exist
_ENV_LOCAL = PROJECT_ROOT / ".env.local"
load_dotenv(_ENV_LOCAL if _ENV_LOCAL.exists() else PROJECT_ROOT / ".env")


class ConfigurationError(ValueError):
    """Missing or invalid configuration; raised before any report work starts."""


# =============================================================================
# AUDIT CONFIGURATION
# =============================================================================

OTHER_CLIENT = "Other"
UNTITLED_SUMMARY = "(untitled)"
DEFAULT_AUDIT_DAYS = 90
SNAPSHOT_FILENAME = "events.json"
CSV_HEADERS = ["week_start", "client", "hours", "count"]
SUMMARY_HEADERS = ["week_start", "client", "summary", "hours", "count"]

CALENDAR_AUDIT_CALENDAR = os.environ.get(
    "CALENDAR_AUDIT_CALENDAR", os.environ.get("CALENDAR_ID", "")
)
CALENDAR_AUDIT_DAYS = os.environ.get("CALENDAR_AUDIT_DAYS", "")


def resolve_calendar_arg(cli_value: str | None) -> str:
    """Calendar ID or name from the command line, falling back to the environment."""
    calendar = cli_value or CALENDAR_AUDIT_CALENDAR
    if not calendar:
        raise ConfigurationError(
            "Missing calendar identifier. Provide --calendar or set CALENDAR_AUDIT_CALENDAR."
        )
    return calendar


def resolve_audit_days(cli_value: int, env_value: str | None = None) -> int:
    """
    Look-back window in days.

    A positive integer in CALENDAR_AUDIT_DAYS overrides the command line value;
    anything else in the environment is ignored.
    """
    raw = CALENDAR_AUDIT_DAYS if env_value is None else env_value
    try:
        env_days = int(raw)
    except (TypeError, ValueError):
        env_days = 0
    return env_days if env_days > 0 else cli_value


# =============================================================================
# MS GRAPH CREDENTIALS (from environment)
# =============================================================================

GRAPH_TENANT_ID = os.environ.get("MICROSOFT_GRAPH_TENANT_ID", "")
GRAPH_APP_ID = os.environ.get("MICROSOFT_GRAPH_APP_ID", "")
GRAPH_CLIENT_SECRET = os.environ.get("MICROSOFT_GRAPH_CLIENT_SECRET", "")

# =============================================================================
# API CONFIGURATION
# =============================================================================

AUDIT_API_KEY = os.environ.get("AUDIT_API_KEY", "")
API_HOST = os.environ.get("API_HOST", "0.0.0.0")
API_PORT = int(os.environ.get("API_PORT", "8000"))
API_DEBUG = os.environ.get("API_DEBUG", "false").lower() == "true"
MAX_UPLOAD_SIZE_MB = int(os.environ.get("MAX_UPLOAD_SIZE_MB", "20"))
MAX_UPLOAD_SIZE_BYTES = MAX_UPLOAD_SIZE_MB * 1024 * 1024
API_VERSION = "1.0.0"
