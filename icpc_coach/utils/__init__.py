"""
Utilities Module
================

Common utilities shared across the service:
- logger: Context-aware logging with levels
- config: Centralized configuration management
"""

from icpc_coach.utils.logger import Logger, logger
from icpc_coach.utils.config import get_config, Config

__all__ = ["Logger", "logger", "get_config", "Config"]
