import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv


def _getenv_int(name: str, default: int) -> int:
    v = os.getenv(name, str(default)).strip()
    try:
        return int(v)
    except ValueError as err:
        raise ValueError(f"hostquery setting {name} must be an integer; got {v!r}") from err


def _getenv_str(name: str, default: str) -> str:
    return os.getenv(name, default).strip()


@dataclass(frozen=True)
class HostQueryConfig:
    """Runtime settings for the system resolver backend."""

    # Threads used for blocking getaddrinfo calls; 0 lets the pool decide.
    executor_workers: int = 0
    log_level: str = "WARNING"


def load_config(env_file: Optional[str] = None) -> HostQueryConfig:
    """Read ``HOSTQUERY_*`` variables, optionally seeding them from *env_file*."""
    if env_file is not None:
        load_dotenv(env_file, override=False)
    workers = _getenv_int("HOSTQUERY_EXECUTOR_WORKERS", 0)
    if workers < 0:
        raise ValueError(f"hostquery setting HOSTQUERY_EXECUTOR_WORKERS must be >= 0; got {workers}")
    return HostQueryConfig(
        executor_workers=workers,
        log_level=_getenv_str("HOSTQUERY_LOG_LEVEL", "WARNING").upper(),
    )


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
