"""
Central logging configuration for runcast.

Usage
-----
In an entrypoint (server, CLI helper):

    from utils.logging_utils import setup_logging

    setup_logging(level="INFO", job_name="runcast_api")

In a module:

    from utils.logging_utils import get_tagged_logger

    logger = get_tagged_logger(__name__, tag="open_meteo_client")
    logger.info("Fetching forecast", extra={"latitude": lat})

Every record carries `job_name` and `tag` so output from the API, the CLI
helper and the provider client can be told apart in one stream.
"""

from __future__ import annotations

import logging
import logging.config
from typing import Any, Mapping, Optional
from urllib.parse import parse_qsl, urlencode, urlparse, urlunparse


# ---------------------------------------------------------------------------
# Bootstrap config (early logs)
# ---------------------------------------------------------------------------

# Records emitted before setup_logging() still get timestamps and levels.
BOOTSTRAP_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"
BOOTSTRAP_DATEFMT = "%Y-%m-%d %H:%M:%S"

logging.basicConfig(
    level=logging.INFO,
    format=BOOTSTRAP_FORMAT,
    datefmt=BOOTSTRAP_DATEFMT,
)

DEFAULT_LOG_FORMAT = (
    "%(asctime)s | %(levelname)s | %(job_name)s | %(tag)s | %(name)s | %(message)s"
)
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

SENSITIVE_PARAM_TOKENS = ("key", "token", "secret", "pass", "pwd")

_CONFIGURED: bool = False


# ---------------------------------------------------------------------------
# Record filters
# ---------------------------------------------------------------------------

class MaxLevelFilter(logging.Filter):
    """Pass only records at or below `max_level` (keeps WARNING+ off stdout)."""

    def __init__(self, max_level: int) -> None:
        super().__init__()
        self.max_level = max_level

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        return record.levelno <= self.max_level


class EnsureTagFilter(logging.Filter):
    """
    Guarantee a `tag` attribute on every record.

    Records from a tagged LoggerAdapter keep their tag; plain loggers
    (uvicorn, requests) get the last segment of their logger name.
    """

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        if not hasattr(record, "tag"):
            logger_name = getattr(record, "name", "")
            record.tag = logger_name.split(".")[-1] if logger_name else "-"
        return True


class JobNameFilter(logging.Filter):
    """Stamp the process-wide job name on every record ("-" when unset)."""

    def __init__(self, job_name: Optional[str] = None) -> None:
        super().__init__()
        self._job_name = job_name or "-"

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        if not hasattr(record, "job_name"):
            record.job_name = self._job_name
        return True


# ---------------------------------------------------------------------------
# Config builder and setup
# ---------------------------------------------------------------------------


def build_logging_config(
    *,
    level: str | int = "INFO",
    log_format: str = DEFAULT_LOG_FORMAT,
    date_format: str = DEFAULT_DATE_FORMAT,
    job_name: Optional[str] = None,
) -> Mapping[str, Any]:
    """
    Build a dictConfig mapping: DEBUG/INFO to stdout, WARNING and above to stderr.

    Parameters
    ----------
    level:
        Root logger level (e.g., "DEBUG", "INFO", logging.INFO).
    log_format, date_format:
        Formatter patterns.
    job_name:
        Logical process name, e.g. "runcast_api".
    """
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "ensure_tag": {"()": EnsureTagFilter},
            "job_name": {"()": JobNameFilter, "job_name": job_name},
            "stdout_max_info": {
                "()": MaxLevelFilter,
                "max_level": logging.INFO,
            },
        },
        "formatters": {
            "standard": {
                "format": log_format,
                "datefmt": date_format,
            },
        },
        "handlers": {
            "stdout": {
                "class": "logging.StreamHandler",
                "formatter": "standard",
                "filters": ["ensure_tag", "job_name", "stdout_max_info"],
                "level": "DEBUG",
                "stream": "ext://sys.stdout",
            },
            "stderr": {
                "class": "logging.StreamHandler",
                "formatter": "standard",
                "filters": ["ensure_tag", "job_name"],
                "level": "WARNING",
                "stream": "ext://sys.stderr",
            },
        },
        "root": {
            "level": level,
            "handlers": ["stdout", "stderr"],
        },
    }


def setup_logging(
    *,
    level: str | int = "INFO",
    log_format: str = DEFAULT_LOG_FORMAT,
    date_format: str = DEFAULT_DATE_FORMAT,
    job_name: Optional[str] = None,
    override_existing: bool = False,
) -> None:
    """
    Configure process-wide logging once.

    Repeated calls are no-ops unless `override_existing` is True.
    """
    global _CONFIGURED

    if _CONFIGURED and not override_existing:
        return

    config_dict = build_logging_config(
        level=level,
        log_format=log_format,
        date_format=date_format,
        job_name=job_name,
    )
    logging.config.dictConfig(config_dict)
    _CONFIGURED = True


def get_tagged_logger(
    name: str,
    *,
    tag: Optional[str] = None,
) -> logging.LoggerAdapter:
    """
    Return a LoggerAdapter that stamps a `tag` on every record.

    `tag` defaults to the last segment of `name`, e.g.
    "runcast.data_sources.open_meteo_client" -> "open_meteo_client".
    """
    base_logger = logging.getLogger(name)
    if tag is None:
        tag = name.split(".")[-1]
    return logging.LoggerAdapter(base_logger, {"tag": tag})


def mask_secret_params(url: str) -> str:
    """Return a copy of a URL with credential-looking query values masked.

    Examples
    --------
    - https://host/search?name=Utrecht&api_key=abc -> https://host/search?name=Utrecht&api_key=%2A%2A%2A
    - https://host/v1/forecast -> unchanged
    """
    try:
        parsed = urlparse(url)
    except ValueError:
        return url

    if not parsed.query:
        return url

    pairs = []
    for key, value in parse_qsl(parsed.query, keep_blank_values=True):
        if any(token in key.lower() for token in SENSITIVE_PARAM_TOKENS):
            pairs.append((key, "***"))
        else:
            pairs.append((key, value))
    return urlunparse(parsed._replace(query=urlencode(pairs)))
