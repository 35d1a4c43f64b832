"""Logging configuration for gravity-transfer."""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Iterable

# Below DEBUG, used to surface web3/urllib3 wire chatter
TRACE = 5
logging.addLevelName(TRACE, "TRACE")

REDACTED = "***redacted***"


class SecretRedactingFilter(logging.Filter):
    """Replaces configured secrets in rendered log messages.

    A hex key is matched with and without its ``0x`` prefix.
    """

    def __init__(self, secrets: Iterable[str | None]):
        super().__init__()
        forms: list[str] = []
        for secret in secrets:
            if not secret:
                continue
            forms.append(secret)
            if secret.lower().startswith("0x") and len(secret) > 2:
                forms.append(secret[2:])
        self.secrets = tuple(forms)

    def filter(self, record: logging.LogRecord) -> bool:
        if not self.secrets:
            return True
        message = record.getMessage()
        masked = message
        for secret in self.secrets:
            masked = masked.replace(secret, REDACTED)
        if masked != message:
            record.msg = masked
            record.args = None
        return True


class ColoredFormatter(logging.Formatter):
    """Log formatter that colours the level name with ANSI escape codes."""

    COLORS = {
        "TRACE": "\033[90m",
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"
    BOLD = "\033[1m"

    def format(self, record: logging.LogRecord) -> str:
        levelname = record.levelname
        if levelname in self.COLORS:
            record.levelname = (
                f"{self.COLORS[levelname]}{self.BOLD}{levelname}{self.RESET}"
            )

        result = super().format(record)

        record.levelname = levelname

        return result


def setup_logging(
    log_level: str | None = None, secrets: Iterable[str | None] = ()
) -> None:
    """Configure logging for the application.

    Uses ``log_level`` when given, otherwise the LOG_LEVEL environment variable
    (defaults to INFO). Any ``secrets`` (such as the Ethereum private key) are
    masked in every message the console handler emits.

    At DEBUG the web3 and urllib3 loggers are held at WARNING; TRACE lets
    everything through, including raw RPC and HTTP traffic.
    """
    level_name = (log_level or os.getenv("LOG_LEVEL", "INFO")).upper()
    level = TRACE if level_name == "TRACE" else getattr(logging, level_name, logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    formatter = ColoredFormatter(
        fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler.setFormatter(formatter)
    handler.addFilter(SecretRedactingFilter(secrets))

    logging.basicConfig(
        level=level,
        handlers=[handler],
        force=True,
    )

    if level_name == "DEBUG":
        logging.getLogger("web3").setLevel(logging.WARNING)
        logging.getLogger("urllib3").setLevel(logging.WARNING)
    elif level_name == "TRACE":
        logging.getLogger("web3").setLevel(TRACE)
        logging.getLogger("urllib3").setLevel(TRACE)
