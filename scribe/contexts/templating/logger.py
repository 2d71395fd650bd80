"""
Templating context logger.

Provides logging interface for templating context with automatic [template] prefix.
All templating modules should import from this module, not from loguru directly.
"""

from pathlib import Path

from loguru import logger

from scribe.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[template]"


def setup_templating_logger(log_dir: Path = None, template_id: str = "") -> Path:
    """
    Setup logger for templating context.

    Configures loguru with provenance tracking and the requested template id.

    Args:
        log_dir: Directory for this rendering session (default: new session directory)
        template_id: Template id recorded in the provenance header

    Returns:
        Path to log file

    Example:
        from scribe.contexts.templating.logger import setup_templating_logger, _log_info

        log_file = setup_templating_logger(template_id="template01")
        _log_info("Starting render...")
    """
    return _setup_logger(
        context_name="template",
        log_dir=log_dir,
        extra_provenance={"Template": template_id or "(default)"},
    )


# Wrapper functions with automatic [template] prefix


def _log_info(message: str) -> None:
    """Log info message with [template] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [template] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [template] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [template] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [template] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level templating-specific logging helpers


def log_template_fallback(requested_id: str, fallback_id: str, reason: str) -> None:
    """Log that a requested template was replaced by the default."""
    _log_warning(f"Template '{requested_id}' unavailable ({reason}); falling back to '{fallback_id}'")


def log_render_result(template_id: str, sections: list[str], char_count: int) -> None:
    """
    Log a completed render.

    Args:
        template_id: Template actually used
        sections: Names of the sections that produced content
        char_count: Length of the final markup
    """
    if sections:
        _log_success(f"Rendered {len(sections)} sections with '{template_id}' ({char_count} chars)")
        _log_debug(f"  Sections: {', '.join(sections)}")
    else:
        _log_warning(f"No renderable sections; emitted empty-document placeholder with '{template_id}'")
