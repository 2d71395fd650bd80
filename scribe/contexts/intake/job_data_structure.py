"""
Job requirement data structure for the Intake context.

Provides JobRequirement, the structured requirement set extracted from a job
posting and consumed by the Targeting context for match scoring and suggestions.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from scribe.utils.llm import coerce_string_list

EXPERIENCE_LEVELS = ("entry", "mid", "senior", "executive")
DEFAULT_EXPERIENCE_LEVEL = "mid"

# Free-form level labels mapped onto the four-tier scale
_LEVEL_ALIASES = {
    "entry": "entry",
    "entry-level": "entry",
    "entry level": "entry",
    "junior": "entry",
    "intern": "entry",
    "internship": "entry",
    "graduate": "entry",
    "mid": "mid",
    "mid-level": "mid",
    "mid level": "mid",
    "intermediate": "mid",
    "senior": "senior",
    "senior-level": "senior",
    "senior level": "senior",
    "lead": "senior",
    "staff": "senior",
    "principal": "senior",
    "executive": "executive",
    "director": "executive",
    "vp": "executive",
    "c-level": "executive",
}


def normalize_experience_level(value: Any) -> str:
    """
    Map a free-form experience level onto entry|mid|senior|executive.

    Unrecognized or missing levels become "mid".
    """
    if not isinstance(value, str):
        return DEFAULT_EXPERIENCE_LEVEL
    label = value.strip().lower()
    if label in EXPERIENCE_LEVELS:
        return label
    if label in _LEVEL_ALIASES:
        return _LEVEL_ALIASES[label]
    # "senior-level|lead" style answers: take the first recognized option
    for part in label.replace("/", "|").split("|"):
        part = part.strip()
        if part in _LEVEL_ALIASES:
            return _LEVEL_ALIASES[part]
    return DEFAULT_EXPERIENCE_LEVEL


def collapse_text(value: Any) -> Optional[str]:
    """Whitespace-collapsed text, or None for non-strings and blank strings."""
    if isinstance(value, str) and value.strip():
        return " ".join(value.split())
    return None


@dataclass
class JobRequirement:
    """
    Structured requirements extracted from a job posting.

    Ephemeral: recomputed per request, never persisted.

    Factory methods:
        empty() - All-empty requirement set (the extraction failure result)
        from_dict(data) - Build from the camelCase analysis JSON shape
    """

    required_skills: list[str] = field(default_factory=list)
    preferred_skills: list[str] = field(default_factory=list)
    experience_level: str = DEFAULT_EXPERIENCE_LEVEL
    industries: list[str] = field(default_factory=list)
    responsibilities: list[str] = field(default_factory=list)
    qualifications: list[str] = field(default_factory=list)
    keywords: list[str] = field(default_factory=list)

    # Populated by URL analysis only
    job_title: Optional[str] = None
    company_name: Optional[str] = None
    job_description: Optional[str] = None

    # =========================================================================
    # FACTORY METHODS
    # =========================================================================

    @classmethod
    def empty(cls) -> "JobRequirement":
        return cls()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "JobRequirement":
        """
        Build from a camelCase mapping, validating each field.

        List fields accept a single string or a list (None and nested values are
        dropped); the experience level is normalized onto the four tiers.
        Unknown keys are ignored; missing keys take their defaults.
        """
        return cls(
            required_skills=coerce_string_list(data.get("requiredSkills")),
            preferred_skills=coerce_string_list(data.get("preferredSkills")),
            experience_level=normalize_experience_level(data.get("experienceLevel")),
            industries=coerce_string_list(data.get("industries")),
            responsibilities=coerce_string_list(data.get("responsibilities")),
            qualifications=coerce_string_list(data.get("qualifications")),
            keywords=coerce_string_list(data.get("keywords")),
            job_title=collapse_text(data.get("jobTitle")),
            company_name=collapse_text(data.get("companyName")),
            job_description=collapse_text(data.get("jobDescription")),
        )

    # =========================================================================
    # ACCESSORS
    # =========================================================================

    @property
    def skills(self) -> list[str]:
        """Required skills followed by preferred skills."""
        return self.required_skills + self.preferred_skills

    def is_empty(self) -> bool:
        return not (
            self.required_skills
            or self.preferred_skills
            or self.responsibilities
            or self.qualifications
            or self.keywords
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the camelCase JSON shape (URL-only fields included when set)."""
        data: dict[str, Any] = {
            "requiredSkills": self.required_skills,
            "preferredSkills": self.preferred_skills,
            "experienceLevel": self.experience_level,
            "industries": self.industries,
            "responsibilities": self.responsibilities,
            "qualifications": self.qualifications,
            "keywords": self.keywords,
        }
        for key, value in (
            ("jobTitle", self.job_title),
            ("companyName", self.company_name),
            ("jobDescription", self.job_description),
        ):
            if value is not None:
                data[key] = value
        return data
