"""
Configuration
=============
Loads environment variables from .env file using python-dotenv.

Environment Variables:
    MINIMAX_API_KEY         — MiniMax API key used for review synthesis
    MINIMAX_GROUP_ID        — MiniMax group id sent with every completion request
    MINIMAX_API_URL         — Chat completion endpoint (default: MiniMax v2 endpoint)
    MINIMAX_MODEL           — Model name (default: MiniMax-M2.5)
    LLM_TIMEOUT_SECONDS     — Optional request timeout; unset means no timeout
    LEGACY_SUMMARY_VARIANT  — "brief" (default) or "detailed"
    PORT                    — HTTP port for the webhook server (default: 3000)
    LOG_DIR                 — Directory for the dated log file (default: logs)

Credential Handling:
    Credentials are never cached. Every review call receives a MiniMaxConfig
    built by the caller; get_minimax_config() re-reads the environment each
    time it is called, so rotated keys are picked up without a restart.

Timeout Philosophy:
    The synthesis core imposes no deadline of its own. Any deadline is the
    caller's responsibility; LLM_TIMEOUT_SECONDS exists for deployments
    that want the HTTP client to enforce one.
"""
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

MINIMAX_API_KEY = os.getenv("MINIMAX_API_KEY", "")
MINIMAX_GROUP_ID = os.getenv("MINIMAX_GROUP_ID", "")
MINIMAX_API_URL = os.getenv(
    "MINIMAX_API_URL", "https://api.minimax.io/v1/text/chatcompletion_v2"
)
MINIMAX_MODEL = os.getenv("MINIMAX_MODEL", "MiniMax-M2.5")

LEGACY_SUMMARY_VARIANT = os.getenv("LEGACY_SUMMARY_VARIANT", "brief")

PORT = int(os.getenv("PORT", 3000))
LOG_DIR = os.getenv("LOG_DIR", "logs")


def _parse_timeout(raw: Optional[str]) -> Optional[float]:
    if not raw or not raw.strip():
        return None
    try:
        value = float(raw)
    except ValueError:
        return None
    return value if value > 0 else None


LLM_TIMEOUT_SECONDS = _parse_timeout(os.getenv("LLM_TIMEOUT_SECONDS"))


# ---------------------------------------------------------------------------
# Per-call credentials
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class MiniMaxConfig:
    """Credentials for a single MiniMax call."""
    api_key: str
    group_id: str

    @property
    def is_complete(self) -> bool:
        return bool(self.api_key) and bool(self.group_id)


def get_minimax_config() -> MiniMaxConfig:
    """Build a MiniMaxConfig from the current environment."""
    return MiniMaxConfig(
        api_key=os.getenv("MINIMAX_API_KEY", ""),
        group_id=os.getenv("MINIMAX_GROUP_ID", ""),
    )
