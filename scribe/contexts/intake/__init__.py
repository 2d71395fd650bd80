"""
Intake Context

Responsibilities:
- Ingests resume records from loosely-structured JSON/YAML payloads
- Normalizes dates and collection shapes into the canonical ResumeRecord
- Extracts structured job requirements from job text or job URLs

Owns: Resume normalization, job description analysis
Never: Renders markup or computes match scores
"""

from scribe.contexts.intake.job_analysis import (
    analyze_job_from_url,
    analyze_job_posting,
    validate_job_url,
)
from scribe.contexts.intake.job_data_structure import JobRequirement
from scribe.contexts.intake.normalizer import load_resume_file, normalize_resume_record

__all__ = [
    "normalize_resume_record",
    "load_resume_file",
    "analyze_job_posting",
    "analyze_job_from_url",
    "validate_job_url",
    "JobRequirement",
]
