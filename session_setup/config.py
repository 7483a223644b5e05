"""Configuration and shared state."""

__version__ = "0.1.0"

import os
import sys
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()

_stderr_print = lambda *a, **kw: print(*a, **kw, file=sys.stderr)


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name, "")
    if not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        _stderr_print(f"Invalid {name}={raw!r}, falling back to {default}")
        return default


CONFIG = {
    "host": os.getenv("HOST", "127.0.0.1"),
    "port": int(os.getenv("PORT", "3000")),
    # Backend that owns the action library and sessions
    "api_base_url": os.getenv("SESSION_API_BASE_URL", "http://localhost:8000").rstrip("/"),
    "api_timeout_seconds": _float_env("SESSION_API_TIMEOUT_SECONDS", 10.0),
    "api_token": os.getenv("SESSION_API_TOKEN", ""),
}


# ── Typed config ─────────────────────────────────────────────


@dataclass
class ApiConfig:
    base_url: str = "http://localhost:8000"
    timeout_seconds: float = 10.0
    token: str = ""

    @property
    def library_url(self) -> str:
        return f"{self.base_url}/api/actions/library"

    @property
    def sessions_url(self) -> str:
        return f"{self.base_url}/api/sessions/"


@dataclass
class AppConfig:
    """Typed configuration built from CONFIG."""

    host: str = "127.0.0.1"
    port: int = 3000
    api: ApiConfig = field(default_factory=ApiConfig)

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Create AppConfig from environment variables."""
        return cls(
            host=CONFIG["host"],
            port=CONFIG["port"],
            api=ApiConfig(
                base_url=CONFIG["api_base_url"],
                timeout_seconds=CONFIG["api_timeout_seconds"],
                token=CONFIG["api_token"],
            ),
        )
