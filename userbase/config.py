"""Application configuration and constants."""
import os
from pathlib import Path

# Directory paths
BASE_DIR = Path(__file__).resolve().parent.parent
DATABASE_PATH = Path(os.environ.get("USERBASE_DATABASE_PATH", str(BASE_DIR / "userbase.db")))

# Auth cookie configuration
COOKIE_NAME = os.environ.get("USERBASE_COOKIE_NAME", "rds-session")
COOKIE_DOMAIN = os.environ.get("USERBASE_COOKIE_DOMAIN") or None
COOKIE_SECURE = os.environ.get("USERBASE_COOKIE_SECURE", "false").lower() == "true"

# JWT configuration
JWT_SECRET = os.environ.get("USERBASE_JWT_SECRET", "dev-jwt-secret-change-me-in-production")
JWT_ALGORITHM = "HS256"
JWT_TTL = int(os.environ.get("USERBASE_JWT_TTL", str(60 * 60 * 24 * 30)))  # 30 days
JWT_REFRESH_TTL = int(os.environ.get("USERBASE_JWT_REFRESH_TTL", str(60 * 60 * 24 * 180)))  # 180 days

# Discord bot integration
DISCORD_BOT_URL = os.environ.get("DISCORD_BOT_URL", "http://localhost:8787").rstrip("/")
DISCORD_BOT_SECRET = os.environ.get("DISCORD_BOT_SECRET", "dev-bot-secret-change-me-in-production")
DISCORD_UNVERIFIED_ROLE_ID = os.environ.get("DISCORD_UNVERIFIED_ROLE_ID", "unverified")

# Identity service (profile verification)
IDENTITY_SERVICE_URL = os.environ.get("IDENTITY_SERVICE_URL", "http://localhost:8000/verify")

# Timeout in seconds for outbound HTTP calls
EXTERNAL_TIMEOUT = float(os.environ.get("EXTERNAL_TIMEOUT", "10"))

# Logging
LOG_LEVEL = os.environ.get("USERBASE_LOG_LEVEL", "INFO")
LOG_JSON = os.environ.get("USERBASE_LOG_JSON", "false").lower() == "true"

# Pagination
DEFAULT_PAGE_SIZE = 100
MAX_PAGE_SIZE = 100

# Roles that can be checked by authorize_roles
SUPERUSER = "super_user"
MEMBER = "member"
APPOWNER = "app_owner"
ARCHIVED = "archived"

# Private user fields never returned by public reads
PRIVATE_USER_FIELDS = ("phone", "email")
SENSITIVE_USER_FIELDS = ("tokens", "chaincode")
