"""
Scoring calibration constants.

The content-quality deductions, the 70-point quality threshold and the experience
tier table are hand-tuned calibration values rather than derived quantities.
They live in an OmegaConf structured config so they can be retuned from YAML
(SCRIBE_SCORING_CONFIG) without code changes.

Example overlay (scoring.yaml):

    quality_threshold: 65
    deductions:
      no_education: 5
    tier_years:
      senior: 6
"""

import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Dict, Optional

from dotenv import load_dotenv
from omegaconf import OmegaConf

load_dotenv()


@dataclass
class QualityDeductions:
    """Points removed from the 100-point content quality score per deficiency."""

    no_experience: int = 40
    single_experience: int = 20
    no_skills: int = 30
    few_skills: int = 15
    no_content_items: int = 35
    few_content_items: int = 20
    short_summary: int = 15
    no_education: int = 10


@dataclass
class ScoringConfig:
    """
    Calibration values for content quality and job match scoring.

    Attributes:
        quality_threshold: Quality score at which the multiplier reaches 1.0
        min_skills: Skill count below which "few skills" applies
        min_content_items: Content item count below which "few items" applies
        min_summary_chars: Summary length below which it counts as too brief
        project_description_min_chars: Project text length that counts as one item
        deductions: Per-deficiency deductions
        tier_years: Required years of experience per experience level
        default_required_years: Required years for an unknown level
        experience_base_score: Score when actual years equal required years
        experience_bonus_per_year: Bonus per year above required
        experience_floor: Minimum score for under-qualified candidates
        default_ai_ats: ATS score assumed when the AI omits one
        fallback_ats: ATS score used by the heuristic path
        max_missing_skills: Missing skills reported by the heuristic path
        max_prompt_job_chars: Job text beyond this length is not sent to the AI
    """

    quality_threshold: float = 70.0
    min_skills: int = 5
    min_content_items: int = 5
    min_summary_chars: int = 50
    project_description_min_chars: int = 20
    deductions: QualityDeductions = field(default_factory=QualityDeductions)
    tier_years: Dict[str, int] = field(
        default_factory=lambda: {"entry": 0, "mid": 3, "senior": 7, "executive": 12}
    )
    default_required_years: int = 3
    experience_base_score: int = 80
    experience_bonus_per_year: int = 2
    experience_floor: int = 40
    default_ai_ats: int = 85
    fallback_ats: int = 65
    max_missing_skills: int = 10
    max_prompt_job_chars: int = 6000


def load_scoring_config(config_path: Optional[Path] = None) -> ScoringConfig:
    """
    Build a ScoringConfig, overlaying a YAML file when given.

    Args:
        config_path: YAML overlay (keys must exist in ScoringConfig)

    Returns:
        ScoringConfig instance

    Raises:
        FileNotFoundError: config_path does not exist
        omegaconf.errors.ConfigKeyError: Overlay contains an unknown key
    """
    config = OmegaConf.structured(ScoringConfig)
    if config_path is not None:
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Scoring config not found: {config_path}")
        config = OmegaConf.merge(config, OmegaConf.load(config_path))
    return OmegaConf.to_object(config)


@lru_cache(maxsize=1)
def get_scoring_config() -> ScoringConfig:
    """Process-wide scoring config (defaults plus SCRIBE_SCORING_CONFIG overlay, if set)."""
    overlay = os.getenv("SCRIBE_SCORING_CONFIG")
    return load_scoring_config(Path(overlay) if overlay else None)
