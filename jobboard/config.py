# jobboard/config.py
import os
from pathlib import Path
from dotenv import load_dotenv

# --- Load env from jobboard/.env OR .env (whichever exists) ---
# Works whether you run from repo root or jobboard/
root = Path(__file__).resolve().parents[1]          # project root
package_env = root / "jobboard" / ".env"
root_env = root / ".env"
if package_env.exists():
    load_dotenv(package_env)
elif root_env.exists():
    load_dotenv(root_env)


def _flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() == "true"


# === 🌍 App Configuration ===
ENV = os.getenv("ENV", "dev").lower()
AUTO_MIGRATE = _flag("AUTO_MIGRATE")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# === 🔐 Auth (tokens are issued by the auth service; we only verify them) ===
JWT_SECRET = os.getenv("JWT_SECRET") or os.getenv("SECRET_KEY") or "dev_insecure_change_me"
JWT_ALGO = os.getenv("JWT_ALGO", "HS256")
JWT_EXPIRES_MIN = int(os.getenv("JWT_EXPIRES_MIN", "60"))
# Tolerate small clock drift (seconds)
JWT_LEEWAY_SEC = int(os.getenv("JWT_LEEWAY_SEC", "30"))

# === 📄 Listing defaults ===
DEFAULT_PAGE_SIZE = int(os.getenv("JOBS_PAGE_SIZE", "10"))
MAX_PAGE_SIZE = 100

# Optional per-call timeout for the job store (seconds); unset = wait forever.
# The caller stops waiting but the worker thread runs on: a timed-out write
# may still commit after the timeout has been reported.
_timeout = os.getenv("JOBBOARD_STORE_TIMEOUT_SECS", "").strip()
STORE_TIMEOUT_SECS = float(_timeout) if _timeout else None

# === 🌍 CORS Settings ===
ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.getenv(
        "ALLOWED_ORIGINS",
        "http://localhost:3000,http://127.0.0.1:3000"
    ).split(",")
    if origin.strip()
]

# === 🗄️ Database Configuration (robust) ===
def _resolve_sqlite_url(url: str) -> str:
    """Turn 'sqlite:///relative.db' into an absolute path under project root.
    Keep ':memory:' as-is. Ensure absolute paths use 4 slashes."""
    if not url.startswith("sqlite:"):
        return url
    if ":memory:" in url:
        return url
    prefix = "sqlite:///"
    if url.startswith(prefix):
        path = url[len(prefix):]
        if Path(path).is_absolute():
            return f"sqlite:////{Path(path).as_posix().lstrip('/')}"
        abs_path = (root / path).resolve()
        return f"sqlite:////{abs_path.as_posix().lstrip('/')}"
    return url

# Prefer env DATABASE_URL; if missing, persist to ./data/jobboard.db
_env_db = os.getenv("DATABASE_URL")
if _env_db:
    DATABASE_URL = _resolve_sqlite_url(_env_db)
else:
    data_dir = (root / "data").resolve()
    data_dir.mkdir(parents=True, exist_ok=True)
    sqlite_path = (data_dir / "jobboard.db").resolve()
    DATABASE_URL = f"sqlite:////{sqlite_path.as_posix().lstrip('/')}"

# Optional SQL echo for debugging (SQL_ECHO=true)
SQL_ECHO = _flag("SQL_ECHO")
