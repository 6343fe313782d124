"""
FloatChat — Runtime configuration
Environment variables (optionally from a local .env file) and logging setup.
"""

import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


def _bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


ANTHROPIC_API_KEY = os.getenv("ANTHROPIC_API_KEY", "")
LLM_MODEL         = os.getenv("FLOATCHAT_MODEL", "claude-sonnet-4-5")
LLM_MAX_TOKENS    = int(os.getenv("FLOATCHAT_MAX_TOKENS", "1024"))
LLM_TEMPERATURE   = float(os.getenv("FLOATCHAT_TEMPERATURE", "0.7"))

# Route safety check: ask the LLM for an analyst verdict on top of the score
LLM_ROUTE_BRIEFING = _bool("FLOATCHAT_LLM_BRIEFING", True)

LOG_DIR = os.getenv("FLOATCHAT_LOG_DIR", "")
PORT    = int(os.getenv("PORT", "8010"))

# In-memory map / chat sessions kept per store; least recently used evicted first
MAX_SESSIONS = int(os.getenv("FLOATCHAT_MAX_SESSIONS", "256"))

LOG_FORMAT = '{"time":"%(asctime)s","level":"%(levelname)s","name":"%(name)s","msg":"%(message)s"}'


def api_key() -> str:
    """Current API key; read on each call so tests and reloads see env changes."""
    return os.getenv("ANTHROPIC_API_KEY", ANTHROPIC_API_KEY)


def configure_logging(log_dir: Optional[str] = None, level: int = logging.INFO) -> None:
    """
    JSON-line logging to stderr, plus ``floatchat.log`` when a log directory
    is configured (argument or FLOATCHAT_LOG_DIR).
    """
    handlers: list = [logging.StreamHandler()]

    target = log_dir or LOG_DIR
    if target:
        path = Path(target)
        path.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(path / "floatchat.log"))

    logging.basicConfig(level=level, handlers=handlers, format=LOG_FORMAT)
