"""
Environment configuration and logging setup.

Values are read from the process environment, after loading a local .env
file if one exists.
"""

from __future__ import annotations
import logging
import os
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


DEFAULT_LEDGER_PRINCIPAL = "ratings-ledger"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"


def is_test_mode() -> bool:
    """Check if running in test mode."""
    return os.getenv("TEST_MODE", "false").lower() == "true"


def get_ledger_principal() -> str:
    """Principal the ledger acts as toward the coprocessor."""
    return os.getenv("RATINGS_LEDGER_PRINCIPAL", DEFAULT_LEDGER_PRINCIPAL)


def get_log_level() -> str:
    return os.getenv("RATINGS_LOG_LEVEL", "INFO").upper()


def configure_logging(level: Optional[str] = None) -> None:
    """
    Configure root logging once for scripts and services.
    """
    logging.basicConfig(level=level or get_log_level(), format=LOG_FORMAT)
