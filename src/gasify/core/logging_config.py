"""
JSON log output for Gasify vault processes.

Every module logs through ``logging.getLogger(__name__)`` under the ``gasify``
package logger with structured ``extra={"event": ...}`` fields. This module
attaches python-json-logger handlers to that package logger so each record
becomes one JSON line.

Level and file default to GASIFY_LOG_LEVEL / GASIFY_LOG_FILE:

    from gasify.core.logging_config import configure_logging

    configure_logging()
"""

import logging
import logging.handlers
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from pythonjsonlogger.json import JsonFormatter

from .config import NETWORK, ConfigurationError, NetworkType, get_log_settings

PACKAGE_LOGGER = "gasify"
ROTATE_BYTES = 50 * 1024 * 1024
ROTATE_BACKUPS = 5


class VaultJsonFormatter(JsonFormatter):
    """Stamps each record with its network, service and source location."""

    def __init__(self, network: str, service: str = PACKAGE_LOGGER):
        super().__init__("%(timestamp)s %(level)s %(name)s %(message)s")
        self.network = network
        self.service = service

    def add_fields(
        self,
        log_record: Dict[str, Any],
        record: logging.LogRecord,
        message_dict: Dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)

        if not log_record.get("timestamp"):
            created = datetime.fromtimestamp(record.created, timezone.utc)
            log_record["timestamp"] = created.isoformat().replace("+00:00", "Z")
        if not log_record.get("level"):
            log_record["level"] = record.levelname.lower()

        log_record["network"] = self.network
        log_record["service"] = self.service
        log_record["source"] = f"{record.module}:{record.funcName}:{record.lineno}"


def setup_logging(
    name: str = PACKAGE_LOGGER,
    level: str = "INFO",
    log_file: Optional[str] = None,
    network: str = NetworkType.TESTNET.value,
    enable_console: bool = True,
) -> logging.Logger:
    """
    Replace the handlers of logger ``name`` with JSON console/file handlers.

    Raises:
        ConfigurationError: If level is not a logging level name
    """
    log_level = logging.getLevelName(level.upper())
    if not isinstance(log_level, int):
        raise ConfigurationError(f"Unknown log level: {level!r}")

    logger = logging.getLogger(name)
    logger.setLevel(log_level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = VaultJsonFormatter(network=network, service=name.split(".")[0])
    handlers: list[logging.Handler] = []
    if enable_console:
        handlers.append(logging.StreamHandler(sys.stdout))
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            logging.handlers.RotatingFileHandler(
                log_file, maxBytes=ROTATE_BYTES, backupCount=ROTATE_BACKUPS
            )
        )

    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return logger


def configure_logging(
    level: Optional[str] = None,
    log_file: Optional[str] = None,
    network: Optional[NetworkType] = None,
    enable_console: bool = True,
) -> logging.Logger:
    """
    Configure the ``gasify`` package logger.

    Arguments left as None fall back to GASIFY_LOG_LEVEL, GASIFY_LOG_FILE and
    GASIFY_NETWORK.
    """
    env_level, env_file = get_log_settings()
    return setup_logging(
        name=PACKAGE_LOGGER,
        level=level or env_level,
        log_file=log_file or env_file,
        network=(network or NETWORK).value,
        enable_console=enable_console,
    )
