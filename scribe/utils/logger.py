"""
Shared loguru setup for SCRIBE command-line sessions.

Library modules never configure sinks; they log through their context's
logger.py wrappers. Scripts call one of the setup_*_logger helpers, which
delegate here.

Each session writes to its own timestamped directory under LOGS_PATH:

    outs/logs/
    └── target_20250301_141502/
        └── target.log
"""

import os
import sys
from datetime import datetime
from pathlib import Path

from dotenv import load_dotenv
from loguru import logger

from scribe import __version__

load_dotenv()
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))
CONSOLE_LOG_LEVEL = os.getenv("SCRIBE_LOG_LEVEL", "INFO")

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <7} | {message}"
CONSOLE_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <7}</level> | <level>{message}</level>"

# Console colors; stdout stays free for rendered markup and JSON output
LEVEL_COLORS = {
    "DEBUG": "<dim>",
    "WARNING": "<yellow>",
    "ERROR": "<red>",
}


def session_log_dir(context_name: str, base_dir: Path = None) -> Path:
    """Timestamped directory for one logging session, e.g. logs/template_20250301_141502."""
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return (base_dir or LOGS_PATH) / f"{context_name}_{stamp}"


def setup_logger(context_name: str, log_dir: Path = None, extra_provenance: dict = None) -> Path:
    """
    Replace loguru's default sink with a DEBUG file sink and a console sink.

    Args:
        context_name: Context identifier ("template", "target", "intake"); names the log file
        log_dir: Directory for this session (default: a new session_log_dir under LOGS_PATH)
        extra_provenance: Extra key/value pairs for the provenance header

    Returns:
        Path to the log file
    """
    log_dir = log_dir or session_log_dir(context_name)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / f"{context_name}.log"

    logger.remove()
    for level_name, color in LEVEL_COLORS.items():
        logger.level(level_name, color=color)

    logger.add(log_file, format=FILE_FORMAT, level="DEBUG", encoding="utf-8")
    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=CONSOLE_LOG_LEVEL, colorize=True)

    log_provenance(extra_provenance)
    return log_file


def log_provenance(extra_context: dict = None) -> None:
    """Write a header recording how this session was invoked."""
    header = {
        "SCRIBE": __version__,
        "Invocation": " ".join(sys.argv),
        "Working directory": Path.cwd(),
        "Python": sys.version.split()[0],
        **(extra_context or {}),
    }
    logger.debug("-" * 72)
    for key, value in header.items():
        logger.debug(f"{key}: {value}")
    logger.debug("-" * 72)
