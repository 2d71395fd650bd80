"""
Content quality assessment.

Scores a resume's structural completeness (0-100) independent of any job. The
score is never shown to end users; it gates confidence in job match scoring.
"""

from dataclasses import dataclass, field
from typing import List

from scribe.contexts.targeting.scoring_config import ScoringConfig, get_scoring_config
from scribe.contexts.templating.resume_data_structure import ResumeRecord


@dataclass
class ContentQuality:
    """
    Structural completeness of a resume.

    Attributes:
        score: 0-100, starting at 100 with fixed deductions, floored at 0
        issues: Human-readable deficiencies (one per deduction applied)
        strengths: Human-readable positives
    """

    score: int
    issues: List[str] = field(default_factory=list)
    strengths: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"score": self.score, "issues": list(self.issues), "strengths": list(self.strengths)}


def count_content_items(record: ResumeRecord, config: ScoringConfig = None) -> int:
    """
    Count detailed content items.

    Every responsibility and achievement in work experience counts as one. Each
    project adds one when its description text exceeds
    project_description_min_chars, plus one per listed technology.
    """
    config = config or get_scoring_config()
    count = 0
    for entry in record.work_experience:
        count += len(entry.responsibilities) + len(entry.achievements)
    for project in record.projects:
        if len(" ".join(project.description).strip()) > config.project_description_min_chars:
            count += 1
        count += len(project.technologies)
    return count


def assess_content_quality(record: ResumeRecord, config: ScoringConfig = None) -> ContentQuality:
    """
    Assess a resume's structural completeness.

    Args:
        record: Normalized resume
        config: Scoring calibration (default: process-wide config)

    Returns:
        ContentQuality with score in [0, 100]
    """
    config = config or get_scoring_config()
    deductions = config.deductions
    issues: List[str] = []
    strengths: List[str] = []
    score = 100

    experience_count = len(record.work_experience)
    if experience_count == 0:
        issues.append("No work experience provided")
        score -= deductions.no_experience
    elif experience_count == 1:
        issues.append("Very limited work experience")
        score -= deductions.single_experience
    else:
        strengths.append(f"{experience_count} work experiences documented")

    skill_count = len(record.skills)
    if skill_count == 0:
        issues.append("No skills listed")
        score -= deductions.no_skills
    elif skill_count < config.min_skills:
        issues.append("Limited skills listed")
        score -= deductions.few_skills
    else:
        strengths.append(f"{skill_count} skills listed")

    content_items = count_content_items(record, config)
    if content_items == 0:
        issues.append("No detailed responsibilities or achievements")
        score -= deductions.no_content_items
    elif content_items < config.min_content_items:
        issues.append("Very limited detail in experience descriptions")
        score -= deductions.few_content_items
    else:
        strengths.append(f"{content_items} detailed content items")

    if len(record.professional_summary.strip()) < config.min_summary_chars:
        issues.append("Missing or very brief professional summary")
        score -= deductions.short_summary
    else:
        strengths.append("Professional summary provided")

    if not record.education:
        issues.append("No education information")
        score -= deductions.no_education

    return ContentQuality(score=max(0, min(100, score)), issues=issues, strengths=strengths)
