"""
config.py - Configuration Management
=====================================
This module handles loading configuration from environment variables.
It reads settings from a .env file and makes them available to the rest of the application.

Environment Variables Used:
---------------------------
- IFSC_LOOKUP_URL       : (Optional) IFSC directory base URL (default: https://ifsc.razorpay.com)
- IFSC_REGION_URL       : (Optional) Region search base URL (default: https://nominatim.openstreetmap.org)
- IFSC_USER_AGENT       : (Optional) User-Agent sent to the region search service
- IFSC_TIMEOUT_SEC      : (Optional) Request timeout in seconds (default: 20)
- IFSC_OUTPUT_FILE      : (Optional) Workbook results are written to (default: output.xlsx)
- IFSC_REGION_FILE      : (Optional) Workbook region search results are saved to (default: regions.xlsx)
- IFSC_PROGRESS_EVERY   : (Optional) Report progress every N rows (default: 20)
- IFSC_INPUT_HEADER_ROW : (Optional) Header row of the input file; unset means no header row
- IFSC_API_HOST         : (Optional) Host the HTTP endpoint binds to (default: 127.0.0.1)
- IFSC_API_PORT         : (Optional) Port the HTTP endpoint listens on (default: 8000)

Example .env file:
------------------
IFSC_OUTPUT_FILE=results/output.xlsx
IFSC_TIMEOUT_SEC=10
IFSC_USER_AGENT=my-team-ifsc-checker/1.0 (ops@example.com)
"""

from dataclasses import dataclass
import os
from pathlib import Path
from dotenv import load_dotenv


DEFAULT_LOOKUP_URL = "https://ifsc.razorpay.com"
DEFAULT_REGION_URL = "https://nominatim.openstreetmap.org"
DEFAULT_USER_AGENT = "ifsccheck/1.0"


# =============================================================================
# SETTINGS DATACLASS
# =============================================================================

@dataclass
class Settings:
    """Container for all application configuration values."""

    # Remote services
    lookup_url: str = DEFAULT_LOOKUP_URL
    region_url: str = DEFAULT_REGION_URL

    # Nominatim rejects requests without an identifying User-Agent
    user_agent: str = DEFAULT_USER_AGENT

    # How long to wait for a remote response before giving up
    timeout_sec: int = 20

    # Output workbooks
    output_file: str = "output.xlsx"
    region_file: str = "regions.xlsx"

    # Progress cadence for bulk runs (rows)
    progress_every: int = 20

    # Which row of the input holds column headers (None = no header row)
    input_header_row: int | None = None

    # HTTP endpoint
    api_host: str = "127.0.0.1"
    api_port: int = 8000


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def _clean(v: str | None) -> str | None:
    """
    Clean and normalize an environment variable value.

    Examples:
        _clean('  hello  ')     -> 'hello'
        _clean('"quoted"')      -> 'quoted'
        _clean("'quoted'")      -> 'quoted'
        _clean('')              -> None
        _clean(None)            -> None
    """
    if v is None:
        return None

    v = v.strip()

    # Remove surrounding quotes if present
    if len(v) >= 2 and ((v.startswith('"') and v.endswith('"')) or (v.startswith("'") and v.endswith("'"))):
        v = v[1:-1].strip()

    return v if v else None


def _url(v: str | None, default: str) -> str:
    """Add a scheme if missing and drop the trailing slash so paths join predictably."""
    url = _clean(v) or default
    if not url.startswith("http"):
        url = "https://" + url
    return url.rstrip("/")


def _int(name: str, default: int | None) -> int | None:
    raw = _clean(os.getenv(name))
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}") from None


# =============================================================================
# MAIN CONFIGURATION LOADER
# =============================================================================

def load_settings(env_file: Path | None = None) -> Settings:
    """
    Load application configuration from environment variables.

    This function:
    1. Loads the .env file from the project root (or `env_file` if given)
    2. Reads all IFSC_* environment variables
    3. Cleans and validates the values
    4. Returns a Settings object

    Raises:
        RuntimeError: If a numeric setting is not an integer
    """
    # .parents[1] = project root (config.py -> ifsccheck/ -> root)
    root_env = env_file or Path(__file__).resolve().parents[1] / ".env"
    load_dotenv(dotenv_path=root_env)

    return Settings(
        lookup_url=_url(os.getenv("IFSC_LOOKUP_URL"), DEFAULT_LOOKUP_URL),
        region_url=_url(os.getenv("IFSC_REGION_URL"), DEFAULT_REGION_URL),
        user_agent=_clean(os.getenv("IFSC_USER_AGENT")) or DEFAULT_USER_AGENT,
        timeout_sec=_int("IFSC_TIMEOUT_SEC", 20),
        output_file=_clean(os.getenv("IFSC_OUTPUT_FILE")) or "output.xlsx",
        region_file=_clean(os.getenv("IFSC_REGION_FILE")) or "regions.xlsx",
        progress_every=max(1, _int("IFSC_PROGRESS_EVERY", 20)),
        input_header_row=_int("IFSC_INPUT_HEADER_ROW", None),
        api_host=_clean(os.getenv("IFSC_API_HOST")) or "127.0.0.1",
        api_port=_int("IFSC_API_PORT", 8000),
    )
