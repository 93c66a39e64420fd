import os
import logging

from utils.env import get_env_str, get_env_bool, get_env_int
from constants import REQUIRED_WIDTH_PX, REQUIRED_HEIGHT_PX, REQUIRED_RESOLUTION_PPI

logger = logging.getLogger(__name__)

BASE_DIR = os.path.abspath(os.path.dirname(__file__))

# -----------------------------------------------------------------------------
# Dotenv loading (LOCAL ONLY)
# -----------------------------------------------------------------------------
# Rules:
# - Hosted deployments are configured via real environment variables.
# - Tests must be deterministic and must NOT implicitly ingest a developer's repo-root .env.
# - Local dev may use .env for convenience.
_RUNNING_HOSTED = bool(os.getenv("RAILWAY_ENVIRONMENT") or os.getenv("RAILWAY_PROJECT_ID"))
_FLASK_ENV_EARLY = (os.getenv("FLASK_ENV") or "").strip().lower()

if (not _RUNNING_HOSTED) and (_FLASK_ENV_EARLY not in {"test", "testing"}):
    try:
        from dotenv import load_dotenv
        load_dotenv(dotenv_path=os.path.join(BASE_DIR, ".env"), override=False)
    except ImportError:
        logger.warning("[Config] python-dotenv not installed; skipping .env loading.")

# -----------------------------------------------------------------------------
# Environment / Stage
# -----------------------------------------------------------------------------
def _normalize_stage(raw: str) -> str:
    raw = (raw or "").strip().lower()
    if raw in {"prod", "production"}:
        return "production"
    if raw in {"stage", "staging"}:
        return "staging"
    if raw in {"test", "testing"}:
        return "test"
    return "dev"


FLASK_ENV = (os.getenv("FLASK_ENV", "development") or "development").strip().lower()
APP_STAGE = _normalize_stage(os.getenv("APP_STAGE", "dev"))

IS_TEST = APP_STAGE == "test" or FLASK_ENV in {"test", "testing"}
IS_STAGING = APP_STAGE == "staging"
IS_PRODUCTION = APP_STAGE == "production"

DEBUG = FLASK_ENV != "production" and not IS_PRODUCTION
TESTING = IS_TEST

# -----------------------------------------------------------------------------
# Secrets
# -----------------------------------------------------------------------------
SECRET_KEY = get_env_str("SECRET_KEY")
if not SECRET_KEY:
    if IS_STAGING or IS_PRODUCTION:
        raise ValueError(f"SECRET_KEY must be set in {APP_STAGE} environment.")
    SECRET_KEY = "dev-secret-key-change-this"
    logger.warning("[Config] WARNING: Using default SECRET_KEY for development. DO NOT use in real environments!")

# -----------------------------------------------------------------------------
# Proxy
# -----------------------------------------------------------------------------
TRUST_PROXY_HEADERS = get_env_bool("TRUST_PROXY_HEADERS", default=False)
PROXY_FIX_NUM_PROXIES = get_env_int("PROXY_FIX_NUM_PROXIES", 1, minimum=1)

# -----------------------------------------------------------------------------
# Upload limits
# -----------------------------------------------------------------------------
# Layered PSD and print-ready PDF files are much larger than web images.
ARTWORK_MAX_UPLOAD_MB = get_env_int("ARTWORK_MAX_UPLOAD_MB", 50, minimum=1)
MAX_CONTENT_LENGTH = ARTWORK_MAX_UPLOAD_MB * 1024 * 1024

ARTWORK_RATE_LIMIT = get_env_str("ARTWORK_RATE_LIMIT", default="30 per minute")
RATELIMIT_STORAGE_URI = get_env_str("RATELIMIT_STORAGE_URI", default="memory://")

# -----------------------------------------------------------------------------
# Artwork print requirements
# -----------------------------------------------------------------------------
# Defaults match the deck printer's minimums. Overrides exist for alternate
# products; lowering them below the printer's minimums is on the operator.
ARTWORK_REQUIRED_WIDTH = get_env_int("ARTWORK_REQUIRED_WIDTH", REQUIRED_WIDTH_PX, minimum=1)
ARTWORK_REQUIRED_HEIGHT = get_env_int("ARTWORK_REQUIRED_HEIGHT", REQUIRED_HEIGHT_PX, minimum=1)
ARTWORK_REQUIRED_RESOLUTION = get_env_int("ARTWORK_REQUIRED_RESOLUTION", REQUIRED_RESOLUTION_PPI, minimum=1)

if IS_PRODUCTION and (
    ARTWORK_REQUIRED_WIDTH < REQUIRED_WIDTH_PX
    or ARTWORK_REQUIRED_HEIGHT < REQUIRED_HEIGHT_PX
    or ARTWORK_REQUIRED_RESOLUTION < REQUIRED_RESOLUTION_PPI
):
    logger.warning(
        "[Config] WARNING: Artwork requirements are below printer minimums "
        f"({ARTWORK_REQUIRED_WIDTH}x{ARTWORK_REQUIRED_HEIGHT}px @ {ARTWORK_REQUIRED_RESOLUTION} DPI)."
    )
