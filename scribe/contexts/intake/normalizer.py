"""
Resume Record Normalization

Coerces heterogeneous resume payloads (API JSON, YAML fixtures, hand-written dicts)
into the canonical ResumeRecord used by the templating and targeting contexts.

Rules:
1. Keys may be camelCase (API contract) or snake_case
2. Native date values become MM/YYYY; machine ISO date strings become MM/YYYY;
   any other string passes through verbatim
3. A collection that arrives as a scalar becomes a one-element collection
4. Missing collections become empty lists, never None
5. Missing optional fields never raise; identity validation belongs to the API layer
"""

import re
from dataclasses import fields
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from omegaconf import OmegaConf

from scribe.contexts.intake.logger import _log_debug, _log_warning
from scribe.contexts.templating.resume_data_structure import (
    COLLECTION_FIELDS,
    ENTRY_TYPES,
    PersonalInfo,
    ResumeRecord,
    snake_to_camel,
)

# Entry fields holding dates (normalized to MM/YYYY when machine-formatted)
DATE_FIELDS = {
    "start_date",
    "end_date",
    "graduation_date",
    "date",
    "expiration_date",
    "publication_date",
}

# Alternate input keys accepted for a canonical field
FIELD_ALIASES = {
    "is_current_job": ("isCurrent", "current"),
    "is_current_role": ("isCurrent", "current"),
    "professional_summary": ("summary",),
    "personal_info": ("contact",),
}

# Field that receives a bare string entry in each collection (None = not accepted)
SCALAR_ENTRY_FIELDS = {
    "skills": "name",
    "languages": "name",
    "hobbies": "name",
    "certifications": "name",
    "awards": "title",
    "additional_sections": "content",
}

ISO_DATE_PATTERN = re.compile(
    r"^(?P<year>\d{4})-(?P<month>\d{2})(?:-\d{2})?(?:[T ][\d:.]+(?:Z|[+-]\d{2}:?\d{2})?)?$"
)


def format_month_year(value: date) -> str:
    """Format a date as MM/YYYY (e.g., date(2021, 3, 14) -> "03/2021")."""
    return f"{value.month:02d}/{value.year}"


def normalize_date(value: Any) -> str:
    """
    Normalize a date field to its display string.

    Args:
        value: date/datetime, string, number, or None

    Returns:
        "MM/YYYY" for native dates and ISO date strings, the string itself for
        any other string, "" when missing

    Example:
        >>> normalize_date(date(2020, 5, 1))
        '05/2020'
        >>> normalize_date("2020-05-01T00:00:00.000Z")
        '05/2020'
        >>> normalize_date("Summer 2019")
        'Summer 2019'
    """
    if value is None:
        return ""
    if isinstance(value, (date, datetime)):
        return format_month_year(value)
    if isinstance(value, str):
        match = ISO_DATE_PATTERN.match(value.strip())
        if match:
            return f"{match.group('month')}/{match.group('year')}"
        return value
    return str(value)


def _coerce_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return " ".join(_coerce_text(item) for item in value if item is not None).strip()
    return str(value)


def _coerce_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "yes", "1", "y")
    return bool(value)


def _coerce_string_list(value: Any) -> List[str]:
    """Coerce a scalar or list into a list of strings (blank scalars become [])."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value if item is not None]
    text = str(value)
    return [text] if text.strip() else []


def _lookup(raw: Mapping[str, Any], name: str) -> Any:
    """Find a canonical field in raw input under its snake, camel, or alias key."""
    for key in (name, snake_to_camel(name), *FIELD_ALIASES.get(name, ())):
        if key in raw and raw[key] is not None:
            return raw[key]
    return None


def _build_entry(entry_type: type, raw: Mapping[str, Any]):
    """Build one dataclass entry from a raw mapping, coercing each field by its type."""
    values: Dict[str, Any] = {}
    for entry_field in fields(entry_type):
        value = _lookup(raw, entry_field.name)
        if entry_field.name in DATE_FIELDS:
            values[entry_field.name] = normalize_date(value)
        elif entry_field.type is bool:
            values[entry_field.name] = _coerce_bool(value)
        elif entry_field.type == List[str]:
            values[entry_field.name] = _coerce_string_list(value)
        else:
            values[entry_field.name] = _coerce_text(value)
    return entry_type(**values)


def _build_collection(name: str, value: Any) -> list:
    """Build a typed collection, accepting a list, a single mapping, or a bare string."""
    if value is None:
        return []
    if isinstance(value, (Mapping, str)):
        value = [value]
    if not isinstance(value, (list, tuple)):
        _log_debug(f"Ignoring non-collection value for '{name}': {type(value).__name__}")
        return []

    entry_type = ENTRY_TYPES[name]
    scalar_field = SCALAR_ENTRY_FIELDS.get(name)
    entries = []
    for item in value:
        if isinstance(item, entry_type):
            entries.append(item)
        elif isinstance(item, Mapping):
            entries.append(_build_entry(entry_type, item))
        elif isinstance(item, str) and scalar_field:
            if item.strip():
                entries.append(_build_entry(entry_type, {scalar_field: item}))
        elif item is not None:
            _log_debug(f"Skipping unsupported entry in '{name}': {type(item).__name__}")
    return entries


def normalize_resume_record(raw: Any) -> ResumeRecord:
    """
    Normalize an arbitrary resume-shaped object into a ResumeRecord.

    Args:
        raw: Mapping in the resume JSON contract (camelCase or snake_case keys),
             or an existing ResumeRecord (returned unchanged)

    Returns:
        ResumeRecord with every collection populated (possibly empty)

    Example:
        >>> record = normalize_resume_record({"skills": "Python", "workExperience": None})
        >>> [s.name for s in record.skills], record.work_experience
        (['Python'], [])
    """
    if isinstance(raw, ResumeRecord):
        return raw
    if raw is None:
        return ResumeRecord()
    if not isinstance(raw, Mapping):
        _log_warning(f"Resume payload is not a mapping ({type(raw).__name__}); using empty record")
        return ResumeRecord()

    personal_raw = _lookup(raw, "personal_info")
    personal_info = (
        _build_entry(PersonalInfo, personal_raw)
        if isinstance(personal_raw, Mapping)
        else PersonalInfo()
    )

    tracking_url: Optional[str] = _lookup(raw, "tracking_url")

    return ResumeRecord(
        personal_info=personal_info,
        professional_summary=_coerce_text(_lookup(raw, "professional_summary")),
        tracking_url=str(tracking_url) if tracking_url else None,
        **{name: _build_collection(name, _lookup(raw, name)) for name in COLLECTION_FIELDS},
    )


def load_resume_file(path: Path) -> ResumeRecord:
    """
    Load and normalize a resume from a YAML or JSON file.

    Args:
        path: Resume file (.yaml, .yml or .json)

    Returns:
        Normalized ResumeRecord

    Raises:
        FileNotFoundError: File does not exist
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Resume file not found: {path}")

    # JSON is a subset of YAML; OmegaConf loads both. Resume text may contain "${", so no interpolation
    raw = OmegaConf.to_container(OmegaConf.load(path), resolve=False)
    _log_debug(f"Loaded resume payload from {path.name}")
    return normalize_resume_record(raw)
