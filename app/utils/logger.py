# Copyright (c) 2025 Waterfall
#
# This source code is dual-licensed under:
# - GNU Affero General Public License v3.0 (AGPLv3) for open source use
# - Commercial License for proprietary use
#
# See LICENSE and LICENSE.md files in the root directory for full license text.
# For commercial licensing inquiries, contact: contact@waterfall-project.pro
"""Application logger configuration.

The portal logs through structlog on top of the standard logging module.
Console output is colored with colorlog; a rotating file in ``logs/``
receives the same events rendered as JSON so that settlement imports and
integrity checks can be traced after the fact.

Usage:
    from app.utils.logger import logger
    logger.info("Settlement months replaced", months=["2025-01"])
"""

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

import colorlog
import structlog

from app.utils.constants import DEFAULT_LOG_FILE_NAME

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

log_dir = Path(__file__).parent.parent.parent / "logs"
log_dir.mkdir(exist_ok=True)

handlers: list[logging.Handler] = []

console_handler = colorlog.StreamHandler()
console_handler.setFormatter(
    colorlog.ColoredFormatter(
        "%(log_color)s[%(asctime)s] %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        log_colors={
            "DEBUG": "cyan",
            "INFO": "green",
            "WARNING": "yellow",
            "ERROR": "red",
            "CRITICAL": "bold_red",
        },
    )
)
handlers.append(console_handler)

file_handler = RotatingFileHandler(
    log_dir / os.environ.get("LOG_FILE_NAME", DEFAULT_LOG_FILE_NAME),
    maxBytes=10 * 1024 * 1024,
    backupCount=5,
    encoding="utf-8",
)
file_handler.setFormatter(logging.Formatter("%(message)s"))
handlers.append(file_handler)

log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
if log_level not in LOG_LEVELS:
    log_level = "INFO"
logging.basicConfig(level=getattr(logging, log_level), handlers=handlers)

structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        # Korean column names must stay readable in the file
        structlog.processors.JSONRenderer(ensure_ascii=False),
    ],
    logger_factory=structlog.stdlib.LoggerFactory(),
    wrapper_class=structlog.stdlib.BoundLogger,
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger(__name__)
