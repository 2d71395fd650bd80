"""
Targeting Context

Responsibilities:
- Assesses structural completeness of a resume independent of any job
- Scores resume/job fit through an AI judgment or a heuristic fallback
- Caps every score by content quality so thin resumes never score high
- Explains differences between original and optimized resumes

Owns: Content quality, match scoring, suggestion generation, optimization orchestration
Never: Escapes markup or loads templates directly
"""

from scribe.contexts.targeting.content_quality import ContentQuality, assess_content_quality
from scribe.contexts.targeting.match_result import MatchResult
from scribe.contexts.targeting.match_scoring import calculate_job_match, get_job_match_score
from scribe.contexts.targeting.optimization import (
    ContentEnhancer,
    OptimizationRequest,
    OptimizationResult,
    optimize_resume_for_job,
)
from scribe.contexts.targeting.suggestions import (
    generate_enhancement_suggestions,
    generate_optimization_suggestions,
)

__all__ = [
    "ContentQuality",
    "assess_content_quality",
    "MatchResult",
    "calculate_job_match",
    "get_job_match_score",
    "generate_enhancement_suggestions",
    "generate_optimization_suggestions",
    "ContentEnhancer",
    "OptimizationRequest",
    "OptimizationResult",
    "optimize_resume_for_job",
]
