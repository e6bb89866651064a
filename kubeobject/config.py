"""Runtime settings read from the environment."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

LOG_LEVEL_ENV = "KUBEOBJECT_LOG_LEVEL"
STRICT_ENV = "KUBEOBJECT_STRICT"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass
class Settings:
    log_level: str = "WARNING"
    strict: bool = False  # Treat semantic warnings as errors


def load_settings() -> Settings:
    return Settings(
        log_level=os.environ.get(LOG_LEVEL_ENV, "WARNING").upper(),
        strict=os.environ.get(STRICT_ENV, "").lower() in {"1", "true", "yes"},
    )


def configure_logging(settings: Settings | None = None, verbose: bool = False) -> None:
    """Configure the root logger; ``verbose`` forces DEBUG."""
    settings = settings or load_settings()
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level, logging.WARNING)
    if not isinstance(level, int):
        level = logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("kubeobject").setLevel(level)
