import os
from pathlib import Path

PROJECT_DIR = Path(__file__).resolve().parent.parent.parent
DATA_DIR = Path(os.environ.get("DATA_DIR", str(PROJECT_DIR / "data")))
SHARE_DB_PATH = DATA_DIR / "shares.db"

PORT = int(os.environ.get("PORT", "19876"))
ROOT_PATH = os.environ.get("ROOT_PATH", "")
PUBLIC_ORIGIN = os.environ.get("PUBLIC_ORIGIN", "")

ASSISTANT_NAME = "Penguin AI"
GATEWAY_BACKEND = os.environ.get("GATEWAY_BACKEND", "claude")
MODEL = os.environ.get("MODEL", "claude-sonnet-4-5-20250929")
ASSISTANT_URL = os.environ.get("ASSISTANT_URL", "")
GATEWAY_TIMEOUT_SECS = float(os.environ.get("GATEWAY_TIMEOUT_SECS", "60"))
HISTORY_WINDOW = int(os.environ.get("HISTORY_WINDOW", "40"))
MAX_AGENT_TURNS = 1

SESSION_TTL_MINUTES = 30


def _csv(name: str) -> frozenset[str]:
    raw = os.environ.get(name, "")
    return frozenset(part.strip() for part in raw.split(",") if part.strip())


OPEN_ACCESS = os.environ.get("OPEN_ACCESS", "0").lower() in ("1", "true", "yes")
APPROVED_USERS = _csv("APPROVED_USERS")
ADMIN_USERS = _csv("ADMIN_USERS")
