"""
Intake context logger.

Provides logging interface for intake context with automatic [intake] prefix.
All intake modules should import from this module, not from loguru directly.
"""

from loguru import logger

CONTEXT_PREFIX = "[intake]"


def _log_info(message: str) -> None:
    """Log info message with [intake] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [intake] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [intake] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [intake] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level intake-specific logging helpers


def log_job_analysis_result(source: str, requirement, repaired: bool = False) -> None:
    """
    Log a successful job analysis.

    Args:
        source: "text" or the analyzed URL
        requirement: JobRequirement produced by the extractor
        repaired: Whether the AI response needed brace repair
    """
    _log_info(
        f"Job analysis from {source}: {len(requirement.required_skills)} required skills, "
        f"{len(requirement.preferred_skills)} preferred, level={requirement.experience_level}"
    )
    if repaired:
        _log_warning("AI job analysis response was malformed and repaired")


def log_job_analysis_fallback(source: str, reason: str) -> None:
    """Log that job analysis degraded to the empty requirement set."""
    _log_warning(f"Job analysis from {source} fell back to empty requirements: {reason}")
