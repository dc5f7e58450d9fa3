"""Logging configuration for the location resolver.

Library modules only create loggers; handlers are installed here, by
the entry point, never on import.
"""

from __future__ import annotations

import logging
from typing import Optional

from .config import ObservabilityConfig, get_config
from .domain.errors import ConfigurationError


def configure_logging(config: Optional[ObservabilityConfig] = None) -> logging.Logger:
    """Apply the observability settings to the root logger.

    Args:
        config: Logging configuration (defaults to the app config).

    Returns:
        The configured root logger.

    Raises:
        ConfigurationError: If the configured level is not a logging level.
    """
    config = config or get_config().observability

    level = logging.getLevelName(config.level.upper())
    if not isinstance(level, int):
        raise ConfigurationError(
            f"Unknown log level: {config.level}",
            setting_name="LOCRES_LOG_LEVEL",
            expected_type="DEBUG|INFO|WARNING|ERROR|CRITICAL",
        )

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(config.format))
    root.addHandler(handler)
    return root
