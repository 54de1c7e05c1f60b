"""
Environment driven settings.

Variables (a .env file in the working directory is honoured):
- LIMS_QC_RULES_DIR: directory with <experiment_type>.yaml rule files
- LIMS_QC_STANDARDS_PATH: alternate quality standards YAML file
- LIMS_QC_ENABLE_METRICS: "true"/"false" (default true)
- LIMS_QC_LOG_LEVEL: logging level name (default INFO)
- LIMS_QC_LOG_FORMAT: "text" or "json" (default text)
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv
from pythonjsonlogger import jsonlogger

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in _TRUE_VALUES


@dataclass(frozen=True)
class Settings:
    """Runtime settings for the service and CLI."""

    rules_dir: Optional[str] = None
    standards_path: Optional[str] = None
    enable_metrics: bool = True
    log_level: str = "INFO"
    log_format: str = "text"

    @classmethod
    def from_env(cls, dotenv: bool = True) -> "Settings":
        """Build settings from the environment, loading .env first."""
        if dotenv:
            load_dotenv()

        return cls(
            rules_dir=os.getenv("LIMS_QC_RULES_DIR") or None,
            standards_path=os.getenv("LIMS_QC_STANDARDS_PATH") or None,
            enable_metrics=_env_flag("LIMS_QC_ENABLE_METRICS", True),
            log_level=os.getenv("LIMS_QC_LOG_LEVEL", "INFO").upper(),
            log_format=os.getenv("LIMS_QC_LOG_FORMAT", "text").lower(),
        )


def setup_logging(level: str = "INFO", log_format: str = "text") -> None:
    """Configure root logging as plain text or JSON lines."""
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    if log_format == "json":
        log_handler = logging.StreamHandler()
        log_handler.setFormatter(
            jsonlogger.JsonFormatter("%(asctime)s %(name)s %(levelname)s %(message)s"))
        logging.basicConfig(level=numeric_level, handlers=[log_handler], force=True)
    else:
        logging.basicConfig(
            level=numeric_level,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
            force=True,
        )
