"""Project-wide single-source configuration constants for the donor dashboard."""

import os
from pathlib import Path

from dotenv import load_dotenv

from utils.path_utils import find_repo_root

# ----- Base directory configuration -------
PROJECT_ROOT = find_repo_root()

load_dotenv(PROJECT_ROOT / ".env")

DATA_DIR: Path = Path(os.getenv("BLOODLINK_DATA_DIR", PROJECT_ROOT / "datasets"))

# ------ Storage -------
DATABASE_PATH: Path = Path(os.getenv("BLOODLINK_DATABASE_PATH", DATA_DIR / "bloodlink.db"))

# ------ Backend server -------
API_HOST: str = os.getenv("HOST", "0.0.0.0")
API_PORT: int = int(os.getenv("PORT", "3000"))
LIVENESS_TEXT: str = "Backend is running"

# ------ Client -------
API_BASE_URL: str = os.getenv("BLOODLINK_API_URL", f"http://localhost:{API_PORT}")
REQUEST_TIMEOUT_SEC: float = 5.0     # per-request timeout for the donor API client
POLL_INTERVAL_SEC: float = 1.0       # dashboard polling cadence
FETCH_WORKERS: int = 4               # thread pool size for dashboard fetches

# ------ Donor data -------
RECENT_DONATIONS_LIMIT: int = 5      # recent donations shown on the dashboard
RECENT_DONATIONS_MAX_LIMIT: int = 50 # upper bound accepted by the backend
ELIGIBILITY_INTERVAL_DAYS: int = 90  # days between whole-blood donations
UNREAD_BADGE_CAP: int = 99           # badge shows "99+" above this

# ------ Logging -------
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
