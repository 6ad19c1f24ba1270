"""
Configuration constants and environment setup.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# =============================================================================
# PATHS
# =============================================================================

PROJECT_ROOT = Path(__file__).parent.parent.parent
DB_PATH = Path(
    os.environ.get("REQUEST_LOG_DB", str(PROJECT_ROOT / "data" / "db" / "collaboration.db"))
)

# =============================================================================
# REQUEST LOGGING
# =============================================================================

REQUEST_LOGGING = os.environ.get("REQUEST_LOGGING", "true").lower() == "true"

# =============================================================================
# API CONFIGURATION
# =============================================================================

API_HOST = os.environ.get("API_HOST", "0.0.0.0")
API_PORT = int(os.environ.get("API_PORT", "8000"))
API_DEBUG = os.environ.get("API_DEBUG", "false").lower() == "true"
MAX_UPLOAD_SIZE_MB = int(os.environ.get("MAX_UPLOAD_SIZE_MB", "100"))
MAX_UPLOAD_SIZE_BYTES = MAX_UPLOAD_SIZE_MB * 1024 * 1024
CORS_ORIGIN_REGEX = os.environ.get("CORS_ORIGIN_REGEX", r"https?://localhost(:\d+)?")
API_VERSION = "1.0.0"
