"""
Targeting context logger.

Provides logging interface for targeting context with automatic [target] prefix.
All targeting modules should import from this module, not from loguru directly.
"""

from pathlib import Path

from loguru import logger

from scribe.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[target]"


def setup_targeting_logger(log_dir: Path = None, job_source: str = "") -> Path:
    """
    Setup logger for targeting context.

    Args:
        log_dir: Directory for this scoring session (default: new session directory)
        job_source: Job file or URL recorded in the provenance header

    Returns:
        Path to log file
    """
    return _setup_logger(
        context_name="target",
        log_dir=log_dir,
        extra_provenance={"Job": job_source or "(none)"},
    )


# Wrapper functions with automatic [target] prefix


def _log_info(message: str) -> None:
    """Log info message with [target] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [target] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [target] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [target] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [target] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level targeting-specific logging helpers


def log_quality_assessment(quality, multiplier: float) -> None:
    """
    Log a content quality assessment and the multiplier it implies.

    Args:
        quality: ContentQuality result
        multiplier: Score multiplier min(1, score / threshold)
    """
    _log_info(f"Content quality: {quality.score}/100, multiplier: {multiplier:.2f}")
    if quality.issues:
        _log_debug(f"  Quality issues: {', '.join(quality.issues)}")


def log_ai_failure(failure_reason: str, provider_failures: list[str], error: object) -> None:
    """Log a classified AI failure that triggered the heuristic fallback."""
    tags = f" ({', '.join(provider_failures)})" if provider_failures else ""
    _log_warning(f"AI job match failed: {failure_reason}{tags}; using heuristic fallback")
    _log_debug(f"  Error: {error}")


def log_match_result(result) -> None:
    """
    Log a completed match.

    Args:
        result: MatchResult from calculate_job_match()
    """
    message = (
        f"Job match ({result.mode}, confidence={result.confidence}): "
        f"overall {result.overall_match}%, skills {result.skills_match}%, "
        f"experience {result.experience_match}%"
    )
    if result.mode == "ai":
        _log_success(message)
    else:
        _log_info(message)
