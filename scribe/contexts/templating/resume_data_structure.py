"""
Resume Data Structures

Defines data classes for the canonical resume record and its entries.
Instances are produced by the intake normalizer and consumed by the section
renderer, the content-quality assessor, and the match scoring engine.

Dates are held as display strings (already normalized to MM/YYYY where the input
was a machine date); every collection defaults to an empty list.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class PersonalInfo:
    """
    Identity and contact details.

    Attributes:
        first_name: Given name
        last_name: Family name
        email: Contact email
        phone: Contact phone number
        location: City/region display string
        linkedin_url: LinkedIn profile URL
        portfolio_url: Portfolio URL (preferred over website_url for display)
        github_url: GitHub profile URL
        website_url: Personal website URL
        professional_title: Headline shown after the name
    """

    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""
    linkedin_url: str = ""
    portfolio_url: str = ""
    github_url: str = ""
    website_url: str = ""
    professional_title: str = ""


@dataclass
class WorkExperience:
    job_title: str = ""
    company: str = ""
    location: str = ""
    start_date: str = ""
    end_date: str = ""
    is_current_job: bool = False
    responsibilities: List[str] = field(default_factory=list)
    achievements: List[str] = field(default_factory=list)


@dataclass
class Education:
    institution: str = ""
    degree: str = ""
    field_of_study: str = ""
    graduation_date: str = ""
    start_date: str = ""
    end_date: str = ""
    location: str = ""
    gpa: str = ""
    coursework: List[str] = field(default_factory=list)


@dataclass
class Skill:
    """
    Single skill entry.

    Attributes:
        name: Skill name (e.g., "Python")
        category: Grouping label (e.g., "technical", "soft")
        proficiency_level: Optional level (beginner, intermediate, advanced, expert)
    """

    name: str = ""
    category: str = ""
    proficiency_level: str = ""


@dataclass
class Project:
    name: str = ""
    description: List[str] = field(default_factory=list)
    technologies: List[str] = field(default_factory=list)
    url: str = ""
    start_date: str = ""
    end_date: str = ""


@dataclass
class Certification:
    name: str = ""
    issuer: str = ""
    date: str = ""
    expiration_date: str = ""
    credential_id: str = ""
    url: str = ""
    description: str = ""


@dataclass
class Language:
    name: str = ""
    proficiency: str = ""


@dataclass
class VolunteerExperience:
    organization: str = ""
    role: str = ""
    location: str = ""
    start_date: str = ""
    end_date: str = ""
    is_current_role: bool = False
    description: str = ""
    achievements: List[str] = field(default_factory=list)


@dataclass
class Award:
    title: str = ""
    issuer: str = ""
    date: str = ""
    description: str = ""


@dataclass
class Publication:
    title: str = ""
    publisher: str = ""
    publication_date: str = ""
    url: str = ""
    description: str = ""


@dataclass
class Reference:
    name: str = ""
    title: str = ""
    company: str = ""
    email: str = ""
    phone: str = ""
    relationship: str = ""


@dataclass
class Hobby:
    name: str = ""
    description: str = ""
    category: str = ""


@dataclass
class AdditionalSection:
    title: str = ""
    content: str = ""


@dataclass
class ResumeRecord:
    """
    Canonical in-memory resume.

    Collections are ordered as entered by the user; the renderer preserves that
    order within each section.

    Attributes:
        personal_info: Identity and contact details
        professional_summary: Free-text summary paragraph
        tracking_url: Optional URL for the tracking footer
        (remaining attributes): Ordered entry collections, empty when absent
    """

    personal_info: PersonalInfo = field(default_factory=PersonalInfo)
    professional_summary: str = ""
    work_experience: List[WorkExperience] = field(default_factory=list)
    education: List[Education] = field(default_factory=list)
    skills: List[Skill] = field(default_factory=list)
    projects: List[Project] = field(default_factory=list)
    certifications: List[Certification] = field(default_factory=list)
    languages: List[Language] = field(default_factory=list)
    volunteer_experience: List[VolunteerExperience] = field(default_factory=list)
    awards: List[Award] = field(default_factory=list)
    publications: List[Publication] = field(default_factory=list)
    references: List[Reference] = field(default_factory=list)
    hobbies: List[Hobby] = field(default_factory=list)
    additional_sections: List[AdditionalSection] = field(default_factory=list)
    tracking_url: Optional[str] = None

    def is_empty(self) -> bool:
        """True when no identity, summary, or collection content is present."""
        has_identity = any(str(value).strip() for value in asdict(self.personal_info).values())
        has_collections = any(
            getattr(self, name) for name in COLLECTION_FIELDS
        )
        return not (has_identity or self.professional_summary.strip() or has_collections)

    def skill_names(self) -> List[str]:
        """Non-empty skill names in entry order."""
        return [skill.name.strip() for skill in self.skills if skill.name.strip()]

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize to the camelCase JSON contract used by the API layer.

        Returns:
            Dict with camelCase keys at every level (e.g., "workExperience", "jobTitle")
        """
        return _camelize(asdict(self))


# Ordered collection attribute names (matches the JSON contract order)
COLLECTION_FIELDS = (
    "work_experience",
    "education",
    "skills",
    "projects",
    "certifications",
    "languages",
    "volunteer_experience",
    "awards",
    "publications",
    "references",
    "hobbies",
    "additional_sections",
)

# Entry type for each collection attribute
ENTRY_TYPES = {
    "work_experience": WorkExperience,
    "education": Education,
    "skills": Skill,
    "projects": Project,
    "certifications": Certification,
    "languages": Language,
    "volunteer_experience": VolunteerExperience,
    "awards": Award,
    "publications": Publication,
    "references": Reference,
    "hobbies": Hobby,
    "additional_sections": AdditionalSection,
}


def snake_to_camel(name: str) -> str:
    """Convert snake_case to camelCase (e.g., "is_current_job" -> "isCurrentJob")."""
    head, *tail = name.split("_")
    return head + "".join(part.capitalize() for part in tail)


def _camelize(value: Any) -> Any:
    if isinstance(value, dict):
        return {snake_to_camel(key): _camelize(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_camelize(item) for item in value]
    return value
