# api/config.py

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel

env_path = Path(__file__).parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DEFAULT_BASE_URL = "https://perk-api-production.up.railway.app"

# The "E" node: the learner has no skills yet
DEFAULT_ENTRY_NODE_ID = "97838643-4e9b-434f-8985-89dd23408647"


class Settings(BaseModel):
    base_url: str = DEFAULT_BASE_URL
    entry_node_id: str = DEFAULT_ENTRY_NODE_ID
    http_timeout_seconds: float = 10.0
    strict_graph_validation: bool = False
    log_level: str = "INFO"


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def load_settings() -> Settings:
    """Builds the settings from environment variables (and .env, if present)."""
    entry_node_id = os.getenv("ENTRY_NODE_ID", DEFAULT_ENTRY_NODE_ID).strip()
    if not entry_node_id:
        raise ValueError("ENTRY_NODE_ID is set but empty. Cannot request learning paths.")

    return Settings(
        base_url=os.getenv("SKILLTREE_API_BASE_URL", DEFAULT_BASE_URL).rstrip("/"),
        entry_node_id=entry_node_id,
        http_timeout_seconds=float(os.getenv("HTTP_TIMEOUT_SECONDS", "10")),
        strict_graph_validation=_env_flag("STRICT_GRAPH_VALIDATION"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
