"""Environment-driven settings and logging setup."""

from __future__ import annotations

import logging
import os
import re
import sys
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_CHECK_IN_TIME = "20:00"
DEFAULT_USER_NAME = "Friend"

_CHECK_IN_RE = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


def normalize_check_in_time(value: str | None) -> str:
    candidate = str(value or "").strip()
    return candidate if _CHECK_IN_RE.match(candidate) else DEFAULT_CHECK_IN_TIME


def normalize_user_name(value: str | None) -> str:
    name = str(value or "").strip()
    return name[:40] if name else DEFAULT_USER_NAME


@dataclass
class JournalConfig:
    db_path: Path | None = None
    llm_provider: str = "none"
    llm_model: str = ""
    llm_timeout: float = 30.0
    check_in_time: str = DEFAULT_CHECK_IN_TIME
    user_name: str = DEFAULT_USER_NAME
    log_level: str = "INFO"


def load_config(dotenv: bool = True) -> JournalConfig:
    """Build a config from ``JOURNAL_*`` environment variables, reading ``.env`` first."""
    if dotenv:
        load_dotenv()
    db_path = os.getenv("JOURNAL_DB_PATH")
    return JournalConfig(
        db_path=Path(db_path).expanduser() if db_path else None,
        llm_provider=os.getenv("JOURNAL_LLM_PROVIDER", "none").strip().lower(),
        llm_model=os.getenv("JOURNAL_LLM_MODEL", ""),
        llm_timeout=float(os.getenv("JOURNAL_LLM_TIMEOUT", "30")),
        check_in_time=normalize_check_in_time(os.getenv("JOURNAL_CHECK_IN_TIME")),
        user_name=normalize_user_name(os.getenv("JOURNAL_USER_NAME")),
        log_level=os.getenv("JOURNAL_LOG_LEVEL", "INFO").upper(),
    )


def configure_logging(config: JournalConfig | None = None) -> None:
    config = config or load_config()
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
