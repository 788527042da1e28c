"""
Environment configuration for agents

Settings are read from process environment variables, with a ``.env`` file
loaded through python-dotenv. ``reload_environment`` re-reads the ``.env``
file so long-running processes can pick up new values without a restart.
"""

import logging
import os
from typing import Dict, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

load_dotenv(override=False)


class AgentSettings(BaseModel):
    """Agent runtime defaults taken from the environment"""
    max_tokens: Optional[int] = Field(default=None, gt=0)
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    # None means no cap on tool-call rounds per turn
    max_tool_loops: Optional[int] = Field(default=None, gt=0)
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "AgentSettings":
        return cls(
            max_tokens=_positive_int_env("AGENT_MAX_TOKENS"),
            temperature=_float_env("AGENT_TEMPERATURE", 0.7),
            max_tool_loops=_positive_int_env("AGENT_MAX_TOOL_LOOPS"),
            log_level=(os.environ.get("AGENT_LOG_LEVEL") or "INFO").upper(),
        )


def _positive_int_env(var_name: str) -> Optional[int]:
    """Read a positive int; unset, invalid or non-positive values disable it"""
    val = os.environ.get(var_name)
    if val is None or not val.strip():
        return None
    try:
        parsed = int(val)
    except ValueError:
        logger.warning(f"Ignoring invalid integer for {var_name}: {val!r}")
        return None
    return parsed if parsed > 0 else None


def _float_env(var_name: str, default: float) -> float:
    val = os.environ.get(var_name)
    if val is None or not val.strip():
        return default
    try:
        parsed = float(val)
    except ValueError:
        logger.warning(f"Ignoring invalid float for {var_name}: {val!r}")
        return default
    if not 0.0 <= parsed <= 2.0:
        logger.warning(f"{var_name}={parsed} out of range [0, 2]; using {default}")
        return default
    return parsed


def get_agent_settings() -> AgentSettings:
    """Current settings; re-read from the environment on every call"""
    return AgentSettings.from_env()


def reload_environment() -> Dict[str, str]:
    """
    Reload .env file and update os.environ

    Returns:
        Dict of changed environment variables
    """
    logger.info("Reloading environment variables from .env file...")
    old_env = dict(os.environ)
    load_dotenv(override=True)

    changed_vars = {}
    for key, value in os.environ.items():
        if key not in old_env or old_env[key] != value:
            changed_vars[key] = value

    agent_changes = [k for k in changed_vars if k.startswith("AGENT_")]
    if agent_changes:
        logger.info(f"Agent settings updated: {agent_changes}")
    logger.info(f"Environment reload complete. {len(changed_vars)} variables changed.")
    return changed_vars


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging for applications embedding the agents"""
    level_name = (level or get_agent_settings().log_level).upper()
    numeric_level = getattr(logging, level_name, None)
    if not isinstance(numeric_level, int):
        logger.warning(f"Unknown log level {level_name!r}; using INFO")
        numeric_level = logging.INFO
    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logging.getLogger().setLevel(numeric_level)
