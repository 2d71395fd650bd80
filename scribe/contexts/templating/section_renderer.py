"""
Resume body rendering.

Turns a ResumeRecord into the LaTeX body inserted at the template's content
placeholder. Sections are an ordered list of SectionRenderer entries, each a
(has_content, render) pair evaluated in a fixed emission order:

    contact -> summary -> education -> skills -> experience -> projects ->
    certifications -> publications -> languages -> volunteer -> awards ->
    hobbies -> references -> additional sections -> tracking footer

A section whose predicate fails, or whose render produces no lines, is skipped
silently. When no section produces content the body is an explicit
empty-document placeholder rather than an empty string.

All user text passes through latex_escaping exactly once, at the point where it
is embedded. Commands never receive empty key-value arguments.
"""

import re
from dataclasses import dataclass
from datetime import date
from typing import Callable, Iterable, List, Optional, Tuple

from scribe.contexts.templating.defaults import (
    DEFAULT_LANGUAGE_GROUP,
    DEFAULT_SKILL_CATEGORY,
    EMPTY_DOCUMENT_PLACEHOLDER,
    HOBBIES_CATEGORY,
    LIST_ITEMSEP,
    LIST_SPACING,
    SECTION_TITLES,
    TRACKING_FOOTER_TEXT,
)
from scribe.contexts.templating.latex_escaping import (
    escape_latex,
    escape_url,
    kv,
    kvs,
    non_empty,
    single_line,
    strip_scheme,
    trim_join,
)
from scribe.contexts.templating.resume_data_structure import Education, ResumeRecord

_MONTH_YEAR_PATTERN = re.compile(r"^\s*(\d{1,2})/(\d{4})\s*$")


@dataclass(frozen=True)
class SectionRenderer:
    """
    One entry in the ordered section list.

    Attributes:
        name: Section identifier (e.g., "education")
        has_content: Predicate over the record; False skips the section
        render: Produces the section's markup lines (may be empty)
    """

    name: str
    has_content: Callable[[ResumeRecord], bool]
    render: Callable[[ResumeRecord, date], List[str]]


# =============================================================================
# SHARED ALGORITHMS
# =============================================================================


def _date_text(value) -> str:
    if isinstance(value, date):
        return f"{value.month:02d}/{value.year}"
    return str(value).strip() if non_empty(value) else ""


def build_date_range(start=None, end=None, is_current: bool = False) -> str:
    """
    Build a display date range.

    Precedence: "start -- end", "start", "end", "" where end is "Present" when
    is_current is set. Accepts pre-formatted strings or date values.

    Example:
        >>> build_date_range("01/2020", "03/2022")
        '01/2020 -- 03/2022'
        >>> build_date_range(None, None, is_current=True)
        'Present'
    """
    start_text = _date_text(start)
    end_text = "Present" if is_current else _date_text(end)
    if start_text and end_text:
        return f"{start_text} -- {end_text}"
    return start_text or end_text


def is_future_date(value, today: date) -> bool:
    """True when value (a date or "MM/YYYY" string) falls after today."""
    if isinstance(value, date):
        return value > today
    if not isinstance(value, str):
        return False
    match = _MONTH_YEAR_PATTERN.match(value)
    if not match:
        return False
    month, year = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12:
        return False
    return date(year, month, 1) > today


def format_graduation(entry: Education, today: date) -> str:
    """
    Graduation display for an education entry.

    - graduation (or end) date in the future: "Graduating <date>"
    - past graduation without start date: "Graduated <date>"
    - past graduation with start date: "<start> -- <graduation>"
    - start date only: "<start> -- In Progress"
    """
    graduation = entry.graduation_date or entry.end_date
    if non_empty(graduation):
        if is_future_date(graduation, today):
            return f"Graduating {_date_text(graduation)}"
        display = build_date_range(entry.start_date, graduation)
        if not non_empty(entry.start_date) and display:
            display = f"Graduated {display}"
        return display
    if non_empty(entry.start_date):
        return build_date_range(entry.start_date, None, is_current=True).replace(
            "Present", "In Progress"
        )
    return ""


def dedupe_program_parts(*parts: Optional[str]) -> str:
    """
    Join degree and field of study, dropping a part contained in another.

    Comparison is case-insensitive substring; the longer, more specific string is
    kept in the position of the first occurrence.

    Example:
        >>> dedupe_program_parts("B.S.", "B.S. Computer Science")
        'B.S. Computer Science'
        >>> dedupe_program_parts("B.S.", "Computer Science")
        'B.S., Computer Science'
    """
    unique: List[str] = []
    for part in parts:
        if not non_empty(part):
            continue
        trimmed = part.strip()
        lowered = trimmed.lower()
        for index, existing in enumerate(unique):
            if lowered in existing.lower():
                break
            if existing.lower() in lowered:
                unique[index] = trimmed
                break
        else:
            unique.append(trimmed)
    return ", ".join(unique)


def capitalize_label(label: str) -> str:
    """Uppercase the first character only ("technical" -> "Technical", "iOS" -> "IOS")."""
    return label[:1].upper() + label[1:]


def group_by_label(pairs: Iterable[Tuple[Optional[str], Optional[str]]], default_label: str):
    """
    Group (label, name) pairs by capitalized label in first-appearance order.

    Pairs with an empty name are dropped; an empty label uses default_label.

    Returns:
        List of (label, [names]) tuples
    """
    groups: dict = {}
    for label, name in pairs:
        if not non_empty(name):
            continue
        key = capitalize_label(label.strip() if non_empty(label) else default_label)
        groups.setdefault(key, []).append(name.strip())
    return list(groups.items())


def clean_items(items: Iterable[Optional[str]]) -> List[str]:
    """Single-line-collapse items and drop the empty ones."""
    return [line for line in (single_line(item) for item in items) if line]


def _itemize(items: List[str], spacing: str = "") -> List[str]:
    """Bullet list lines, or [] when there are no items (no empty itemize)."""
    if not items:
        return []
    lines = [r"    \begin{itemize}"]
    if spacing:
        lines.append(f"        {spacing}")
    lines.append(f"        {LIST_ITEMSEP}")
    lines.extend(f"        \\item {escape_latex(item)}" for item in items)
    lines.append(r"    \end{itemize}")
    return lines


def _section(comment: str, environment: str, title: str, blocks: List[str]) -> List[str]:
    if not blocks:
        return []
    return [
        f"% --------- {comment} -----------",
        f"\\begin{{{environment}}}{{{title}}}",
        *blocks,
        f"\\end{{{environment}}}",
        "",
    ]


def _skill_items(groups) -> List[str]:
    lines = []
    for index, (label, names) in enumerate(groups):
        args = kvs([kv("category", label), kv("skills", ", ".join(names))])
        if args:
            suffix = "" if index == len(groups) - 1 else r" \\"
            lines.append(f"    \\skillItem[{args}]{suffix}")
    return lines


def _titled(name: Optional[str], url: Optional[str]) -> str:
    """Entry title with its link appended in parentheses (scheme stripped)."""
    title = name.strip() if non_empty(name) else ""
    if non_empty(url):
        title = f"{title} ({strip_scheme(url)})".strip()
    return title


# =============================================================================
# SECTION RENDERERS
# =============================================================================


def render_contact(record: ResumeRecord, today: date = None) -> List[str]:
    info = record.personal_info
    full_name = trim_join([trim_join([info.first_name, info.last_name], " "), info.professional_title], ", ")

    site = strip_scheme(info.portfolio_url or info.website_url)
    links = trim_join([strip_scheme(info.github_url), site], " | ")

    args = kvs(
        [
            kv("fullname", full_name),
            kv("email", info.email),
            kv("phone", info.phone),
            kv("linkedin", strip_scheme(info.linkedin_url)),
            kv("github", links),
        ]
    )
    if not args:
        return []
    return ["% --------- Contact Information -----------", f"\\introduction[{args}]", ""]


def render_summary(record: ResumeRecord, today: date = None) -> List[str]:
    summary = escape_latex(record.professional_summary)
    if not summary:
        return []
    return ["% --------- Summary -----------", f"\\summary{{{summary}}}", ""]


def render_education(record: ResumeRecord, today: date = None) -> List[str]:
    today = today or date.today()
    items = []
    for entry in record.education:
        args = kvs(
            [
                kv("university", entry.institution),
                kv("college", entry.location),
                kv("program", dedupe_program_parts(entry.degree, entry.field_of_study)),
                kv("graduation", format_graduation(entry, today)),
                kv("grade", f"{entry.gpa.strip()} GPA" if non_empty(entry.gpa) else ""),
                kv("coursework", ", ".join(clean_items(entry.coursework))),
            ]
        )
        if args:
            items.append(f"    \\educationItem[{args}]")

    # Blank line between items
    blocks = []
    for index, item in enumerate(items):
        if index:
            blocks.append("")
        blocks.append(item)
    return _section("Education", "educationSection", SECTION_TITLES["education"], blocks)


def render_skills(record: ResumeRecord, today: date = None) -> List[str]:
    groups = group_by_label(
        ((skill.category, skill.name) for skill in record.skills), DEFAULT_SKILL_CATEGORY
    )
    return _section("Skills", "skillsSection", SECTION_TITLES["skills"], _skill_items(groups))


def render_experience(record: ResumeRecord, today: date = None) -> List[str]:
    blocks = []
    for entry in record.work_experience:
        args = kvs(
            [
                kv("company", entry.company),
                kv("location", entry.location),
                kv("position", entry.job_title),
                kv("duration", build_date_range(entry.start_date, entry.end_date, entry.is_current_job)),
            ]
        )
        if not args:
            continue
        blocks.append(f"    \\experienceItem[{args}]")
        blocks.extend(
            _itemize(clean_items(entry.responsibilities + entry.achievements), LIST_SPACING["experience"])
        )
        blocks.append("")
    return _section("Experience", "experienceSection", SECTION_TITLES["experience"], blocks)


def render_projects(record: ResumeRecord, today: date = None) -> List[str]:
    blocks = []
    for project in record.projects:
        descriptions = clean_items(project.description)
        key_highlight = descriptions[0] if descriptions else None
        args = kvs(
            [
                kv("title", _titled(project.name, project.url)),
                kv("duration", build_date_range(project.start_date, project.end_date)),
                kv("keyHighlight", key_highlight),
            ]
        )
        if not args:
            continue
        blocks.append(f"    \\projectItem[{args}]")

        extra = descriptions[1:]
        technologies = clean_items(project.technologies)
        if technologies:
            extra.append(f"Technologies used: {', '.join(technologies)}")
        blocks.extend(_itemize(extra, LIST_SPACING["projects"]))
        blocks.append("")
    return _section("Projects", "experienceSection", SECTION_TITLES["projects"], blocks)


def _render_titled_entries(entries, comment: str, title: str) -> List[str]:
    """Shared renderer for (title, duration, highlight, description) project-style entries."""
    blocks = []
    for entry_title, duration, highlight, description in entries:
        args = kvs([kv("title", entry_title), kv("duration", duration), kv("keyHighlight", highlight)])
        if not args:
            continue
        blocks.append(f"    \\projectItem[{args}]")
        blocks.extend(_itemize(clean_items([description]), LIST_SPACING["entries"]))
        blocks.append("")
    return _section(comment, "experienceSection", title, blocks)


def render_certifications(record: ResumeRecord, today: date = None) -> List[str]:
    entries = (
        (
            _titled(cert.name, cert.url),
            build_date_range(cert.date),
            f"Issued by {cert.issuer.strip()}" if non_empty(cert.issuer) else None,
            cert.description,
        )
        for cert in record.certifications
    )
    return _render_titled_entries(entries, "Certifications", SECTION_TITLES["certifications"])


def render_publications(record: ResumeRecord, today: date = None) -> List[str]:
    entries = (
        (
            _titled(pub.title, pub.url),
            build_date_range(pub.publication_date),
            f"Published by {pub.publisher.strip()}" if non_empty(pub.publisher) else None,
            pub.description,
        )
        for pub in record.publications
    )
    return _render_titled_entries(entries, "Publications", SECTION_TITLES["publications"])


def render_languages(record: ResumeRecord, today: date = None) -> List[str]:
    groups = group_by_label(
        ((language.proficiency, language.name) for language in record.languages),
        DEFAULT_LANGUAGE_GROUP,
    )
    return _section("Languages", "skillsSection", SECTION_TITLES["languages"], _skill_items(groups))


def render_volunteer(record: ResumeRecord, today: date = None) -> List[str]:
    blocks = []
    for entry in record.volunteer_experience:
        if not (non_empty(entry.organization) or non_empty(entry.role)):
            continue
        args = kvs(
            [
                kv("company", entry.organization),
                kv("location", entry.location),
                kv("position", entry.role),
                kv("duration", build_date_range(entry.start_date, entry.end_date, entry.is_current_role)),
            ]
        )
        blocks.append(f"    \\experienceItem[{args}]")
        blocks.extend(
            _itemize(clean_items([entry.description, *entry.achievements]), LIST_SPACING["volunteer"])
        )
        blocks.append("")
    return _section("Other work experience", "experienceSection", SECTION_TITLES["volunteer"], blocks)


def render_awards(record: ResumeRecord, today: date = None) -> List[str]:
    entries = (
        (
            award.title,
            build_date_range(award.date),
            f"Issued by {award.issuer.strip()}" if non_empty(award.issuer) else None,
            award.description if single_line(award.description) != single_line(award.title) else None,
        )
        for award in record.awards
    )
    return _render_titled_entries(entries, "Activities", SECTION_TITLES["awards"])


def render_hobbies(record: ResumeRecord, today: date = None) -> List[str]:
    names = ", ".join(hobby.name.strip() for hobby in record.hobbies if non_empty(hobby.name))
    args = kvs([kv("category", HOBBIES_CATEGORY), kv("skills", names)]) if names else ""
    if not args:
        return []
    return _section("Hobbies", "skillsSection", SECTION_TITLES["hobbies"], [f"    \\skillItem[{args}]"])


def render_references(record: ResumeRecord, today: date = None) -> List[str]:
    blocks = []
    for reference in record.references:
        args = kvs(
            [
                kv("title", reference.name),
                kv("keyHighlight", trim_join([reference.title, reference.company], ", ")),
            ]
        )
        if not args:
            continue
        blocks.append(f"    \\projectItem[{args}]")
        details = [
            f"{label}: {value}"
            for label, value in (
                ("Email", reference.email),
                ("Phone", reference.phone),
                ("Relationship", reference.relationship),
            )
            if non_empty(value)
        ]
        blocks.extend(_itemize(clean_items(details), LIST_SPACING["entries"]))
        blocks.append("")
    return _section("References", "experienceSection", SECTION_TITLES["references"], blocks)


def render_additional_sections(record: ResumeRecord, today: date = None) -> List[str]:
    blocks = []
    for section in record.additional_sections:
        content = escape_latex(section.content)
        if not content:
            continue
        title = escape_latex(section.title) or "Additional Information"
        blocks.extend(
            [
                f"    \\begin{{experienceSection}}{{{title}}}",
                f"    {content}",
                r"    \end{experienceSection}",
                "",
            ]
        )
    if not blocks:
        return []
    return ["% --------- Additional Sections -----------", *blocks, ""]


def render_tracking_footer(record: ResumeRecord, today: date = None) -> List[str]:
    url = single_line(record.tracking_url)
    if not url:
        return []
    return [
        "",
        "% --------- Tracking Footer -----------",
        r"\vfill",
        r"\begin{center}",
        f"\\footnotesize \\color{{gray}} {TRACKING_FOOTER_TEXT} "
        f"\\href{{{escape_url(url)}}}{{{escape_latex(url)}}}",
        r"\end{center}",
    ]


# =============================================================================
# ORDERED SECTION LIST
# =============================================================================


def _has_identity(record: ResumeRecord) -> bool:
    info = record.personal_info
    return any(
        non_empty(value)
        for value in (
            info.first_name,
            info.last_name,
            info.professional_title,
            info.email,
            info.phone,
            info.linkedin_url,
            info.github_url,
            info.portfolio_url,
            info.website_url,
        )
    )


def _has_volunteer(record: ResumeRecord) -> bool:
    return any(
        non_empty(entry.organization) and non_empty(entry.role)
        for entry in record.volunteer_experience
    )


SECTION_RENDERERS: Tuple[SectionRenderer, ...] = (
    SectionRenderer("contact", _has_identity, render_contact),
    SectionRenderer("summary", lambda r: non_empty(r.professional_summary), render_summary),
    SectionRenderer("education", lambda r: bool(r.education), render_education),
    SectionRenderer("skills", lambda r: bool(r.skills), render_skills),
    SectionRenderer("experience", lambda r: bool(r.work_experience), render_experience),
    SectionRenderer("projects", lambda r: bool(r.projects), render_projects),
    SectionRenderer("certifications", lambda r: bool(r.certifications), render_certifications),
    SectionRenderer("publications", lambda r: bool(r.publications), render_publications),
    SectionRenderer("languages", lambda r: bool(r.languages), render_languages),
    SectionRenderer("volunteer", _has_volunteer, render_volunteer),
    SectionRenderer("awards", lambda r: bool(r.awards), render_awards),
    SectionRenderer("hobbies", lambda r: bool(r.hobbies), render_hobbies),
    SectionRenderer("references", lambda r: bool(r.references), render_references),
    SectionRenderer("additional_sections", lambda r: bool(r.additional_sections), render_additional_sections),
    SectionRenderer("tracking_footer", lambda r: non_empty(r.tracking_url), render_tracking_footer),
)


def render_sections(
    record: ResumeRecord,
    today: Optional[date] = None,
    renderers: Iterable[SectionRenderer] = SECTION_RENDERERS,
) -> List[Tuple[str, List[str]]]:
    """
    Evaluate each section in order.

    Returns:
        (name, lines) for every section that produced content
    """
    today = today or date.today()
    rendered = []
    for renderer in renderers:
        if not renderer.has_content(record):
            continue
        lines = renderer.render(record, today)
        if lines:
            rendered.append((renderer.name, lines))
    return rendered


def render_resume_body(record: ResumeRecord, today: Optional[date] = None) -> str:
    """
    Render the full LaTeX body for a resume.

    Args:
        record: Normalized resume
        today: Reference date for "Graduating" vs "Graduated" (default: date.today())

    Returns:
        Body markup, or the empty-document placeholder when no section has content
    """
    lines = [line for _, section_lines in render_sections(record, today) for line in section_lines]
    if not lines:
        return EMPTY_DOCUMENT_PLACEHOLDER
    return "\n".join(lines)
