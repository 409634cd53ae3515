"""
Configuration Management
========================

Centralized configuration for the coach. Every environment variable the
service reads is declared, typed and defaulted here.

Sections:
- openai: model provider credentials and default model
- codeforces: data API credentials, base URL and request spacing
- agent: history window, retry policy and response size
- server: HTTP bind address and static UI directory

Usage:
    from icpc_coach.utils.config import get_config

    config = get_config()
    print(config.openai.model)
    print(config.codeforces.min_interval_seconds)
"""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from icpc_coach.utils.logger import Logger


def _required(name: str) -> str:
    """
    Get a required environment variable.

    Raises:
        ValueError: If the variable is not set
    """
    value = os.getenv(name)
    if not value:
        raise ValueError(
            f"Missing required environment variable: {name}\n"
            f"Please ensure {name} is set in your .env file."
        )
    return value


def _optional(name: str, default: str) -> str:
    """Get an optional environment variable with a default."""
    return os.getenv(name, default)


def _optional_int(name: str, default: int) -> int:
    """
    Get an optional integer environment variable.

    Invalid values fall back to the default with a warning.
    """
    value = os.getenv(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        Logger("Config").warning(f"{name} is not a valid integer, using default: {default}")
        return default


# ==============================================================================
# Configuration Dataclasses
# ==============================================================================

@dataclass(frozen=True)
class OpenAIConfig:
    """Model provider configuration."""
    api_key: str            # sk-... API key
    model: str              # Default chat model
    base_url: str | None    # Any OpenAI-compatible endpoint


@dataclass(frozen=True)
class CodeforcesConfig:
    """Codeforces API configuration."""
    api_key: str | None         # Only needed for signed methods
    api_secret: str | None
    base_url: str
    min_interval_seconds: float # Spacing between consecutive API calls
    timeout_seconds: float


@dataclass(frozen=True)
class AgentConfig:
    """Agent loop tuning."""
    max_history_turns: int = 4
    max_retries: int = 3
    retry_base_seconds: int = 15
    retry_max_seconds: int = 60
    max_tokens: int = 4096


@dataclass(frozen=True)
class ServerConfig:
    """HTTP server configuration."""
    host: str
    port: int
    static_dir: Path


@dataclass(frozen=True)
class Config:
    """
    Root configuration object.

    Access via:
        config = get_config()
        config.openai.api_key
        config.agent.max_retries
    """
    openai: OpenAIConfig
    codeforces: CodeforcesConfig
    agent: AgentConfig
    server: ServerConfig
    log_level: str


def load_config() -> Config:
    """
    Load and validate all configuration from environment.

    Loads .env first, then validates required values and applies defaults.

    Raises:
        ValueError: If required configuration is missing
    """
    load_dotenv()

    project_root = Path(__file__).parent.parent.parent

    return Config(
        openai=OpenAIConfig(
            api_key=_required("OPENAI_API_KEY"),
            model=_optional("OPENAI_MODEL", "gpt-4o-mini"),
            base_url=os.getenv("OPENAI_BASE_URL") or None,
        ),
        codeforces=CodeforcesConfig(
            api_key=os.getenv("CODEFORCES_API_KEY") or None,
            api_secret=os.getenv("CODEFORCES_API_SECRET") or None,
            base_url=_optional("CODEFORCES_API_BASE", "https://codeforces.com/api"),
            min_interval_seconds=_optional_int("CODEFORCES_MIN_INTERVAL_MS", 500) / 1000,
            timeout_seconds=_optional_int("CODEFORCES_TIMEOUT_SECONDS", 30),
        ),
        agent=AgentConfig(
            max_history_turns=_optional_int("AGENT_MAX_HISTORY_TURNS", 4),
            max_retries=_optional_int("AGENT_MAX_RETRIES", 3),
            retry_base_seconds=_optional_int("AGENT_RETRY_BASE_SECONDS", 15),
            retry_max_seconds=_optional_int("AGENT_RETRY_MAX_SECONDS", 60),
            max_tokens=_optional_int("AGENT_MAX_TOKENS", 4096),
        ),
        server=ServerConfig(
            host=_optional("HOST", "0.0.0.0"),
            port=_optional_int("PORT", 3000),
            static_dir=project_root / _optional("STATIC_DIR", "public"),
        ),
        log_level=_optional("LOG_LEVEL", "info"),
    )


# ==============================================================================
# Singleton
# ==============================================================================

_config_instance: Config | None = None


def get_config() -> Config:
    """
    Get the singleton configuration instance.

    Loaded on first access and cached afterwards.
    """
    global _config_instance
    if _config_instance is None:
        _config_instance = load_config()
    return _config_instance


def is_codeforces_auth_configured() -> bool:
    """Check if signed Codeforces methods can be called."""
    config = get_config()
    return bool(config.codeforces.api_key and config.codeforces.api_secret)
