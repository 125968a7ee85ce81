"""
Application settings.

Settings are read from environment variables with sensible defaults. A ``.env``
file is loaded first when settings are built with :meth:`Settings.from_env`.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from dotenv import load_dotenv

# Environments.
ENV_LOCAL = "local"
ENV_DEV = "dev"
ENV_PROD = "prod"
ENV_ALL = (ENV_LOCAL, ENV_DEV, ENV_PROD)

# Execution contexts.
CXT_WEB = "web"
CXT_CLI = "cli"
CXT_TEST = "test"
CXT_ALL = (CXT_WEB, CXT_CLI, CXT_TEST)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass
class Settings:
    """Settings shared by the bootstrapper and every provider (bound as ``config``)."""

    app_name: str = field(default_factory=lambda: os.getenv("KICKSTART_APP_NAME", "kickstart"))
    environment: str = field(default_factory=lambda: os.getenv("KICKSTART_ENV", ENV_LOCAL))
    context: str = field(default_factory=lambda: os.getenv("KICKSTART_CONTEXT", CXT_WEB))
    log_level: str = field(
        default_factory=lambda: os.getenv("KICKSTART_LOG_LEVEL", "INFO").upper()
    )
    values: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None, **values: Any) -> "Settings":
        """Load ``.env`` then build validated settings; keyword arguments become ``values``."""
        load_dotenv(dotenv_path)
        settings = cls(values=values)
        settings.validate()
        return settings

    def validate(self) -> None:
        """Raise ``ValueError`` for settings the application cannot start with."""
        if not self.environment:
            raise ValueError("environment must not be empty")
        if not self.context:
            raise ValueError("context must not be empty")
        if self.log_level not in LOG_LEVELS:
            raise ValueError(
                f"Unknown log level {self.log_level!r}, expected one of {LOG_LEVELS}"
            )

    def get(self, key: str, default: Any = None) -> Any:
        """Look up an extra value, falling back to a setting attribute of the same name."""
        if key in self.values:
            return self.values[key]
        return getattr(self, key, default) if key != "values" else default

    def setup_logging(self, fmt: str = LOG_FORMAT) -> None:
        """Attach a console handler to the ``kickstart`` logger at the configured level."""
        logger = logging.getLogger("kickstart")
        logger.setLevel(getattr(logging, self.log_level))

        if not any(getattr(h, "_kickstart", False) for h in logger.handlers):
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter(fmt))
            handler._kickstart = True
            logger.addHandler(handler)

    @property
    def is_production(self) -> bool:
        return self.environment == ENV_PROD
