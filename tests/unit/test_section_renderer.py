"""Unit tests for resume body rendering."""

from datetime import date

import pytest

from scribe.contexts.intake.normalizer import normalize_resume_record
from scribe.contexts.templating.defaults import EMPTY_DOCUMENT_PLACEHOLDER
from scribe.contexts.templating.resume_data_structure import (
    AdditionalSection,
    Award,
    Certification,
    Education,
    Hobby,
    Language,
    Publication,
    Reference,
    ResumeRecord,
    VolunteerExperience,
)
from scribe.contexts.templating.section_renderer import (
    SECTION_RENDERERS,
    build_date_range,
    dedupe_program_parts,
    format_graduation,
    group_by_label,
    render_additional_sections,
    render_awards,
    render_certifications,
    render_contact,
    render_education,
    render_experience,
    render_hobbies,
    render_languages,
    render_publications,
    render_references,
    render_resume_body,
    render_sections,
    render_skills,
    render_volunteer,
)

TODAY = date(2024, 1, 1)


# --- Shared algorithms ---


@pytest.mark.unit
@pytest.mark.parametrize(
    "start, end, is_current, expected",
    [
        ("01/2020", "03/2022", False, "01/2020 -- 03/2022"),
        ("01/2020", "", True, "01/2020 -- Present"),
        ("01/2020", None, False, "01/2020"),
        (None, "03/2022", False, "03/2022"),
        (None, None, True, "Present"),
        (None, None, False, ""),
        (date(2020, 1, 5), date(2021, 2, 1), False, "01/2020 -- 02/2021"),
    ],
)
def test_build_date_range(start, end, is_current, expected):
    """Test date range precedence for every start/end/current combination."""
    assert build_date_range(start, end, is_current) == expected


@pytest.mark.unit
def test_future_graduation():
    """Test a future graduation date renders as Graduating instead of a range."""
    entry = Education(institution="MIT", start_date="09/2022", graduation_date="05/2026")
    assert format_graduation(entry, TODAY) == "Graduating 05/2026"


@pytest.mark.unit
def test_past_graduation():
    """Test past graduation renders a range, or Graduated when there is no start."""
    with_start = Education(start_date="09/2011", graduation_date="05/2015")
    without_start = Education(graduation_date="05/2015")

    assert format_graduation(with_start, TODAY) == "09/2011 -- 05/2015"
    assert format_graduation(without_start, TODAY) == "Graduated 05/2015"


@pytest.mark.unit
@pytest.mark.parametrize(
    "degree, field_of_study, expected",
    [
        ("B.S.", "B.S. Computer Science", "B.S. Computer Science"),
        ("B.S. Computer Science", "computer science", "B.S. Computer Science"),
        ("B.S.", "Computer Science", "B.S., Computer Science"),
        ("", "Physics", "Physics"),
        (None, None, ""),
    ],
)
def test_dedupe_program_parts(degree, field_of_study, expected):
    """Test degree/field dedup keeps the more specific string once."""
    assert dedupe_program_parts(degree, field_of_study) == expected


@pytest.mark.unit
def test_group_by_label():
    """Test grouping is by capitalized label in first-appearance order."""
    groups = group_by_label(
        [("technical", "Python"), ("soft", "Mentoring"), ("Technical", "SQL"), (None, "Git"), ("x", "")],
        "General",
    )
    assert groups == [("Technical", ["Python", "SQL"]), ("Soft", ["Mentoring"]), ("General", ["Git"])]


# --- Section renderers ---


@pytest.mark.unit
def test_contact_block(full_resume):
    """Test the contact command carries only present arguments."""
    lines = render_contact(normalize_resume_record(full_resume))
    command = lines[1]

    assert command.startswith(r"\introduction[")
    assert "fullname={Ada Lovelace, Backend Engineer}" in command
    assert r"email={ada\_l@example.com}" in command
    assert "linkedin={linkedin.com/in/ada}" in command
    assert "github={github.com/ada}" in command


@pytest.mark.unit
def test_contact_suppressed_without_values():
    """Test no \\introduction command is emitted when every value is empty."""
    record = normalize_resume_record({"personalInfo": {"firstName": "  ", "email": ""}})
    assert render_contact(record) == []


@pytest.mark.unit
def test_education_dedup_in_output(full_resume):
    """Test the rendered program shows the degree/field string exactly once."""
    text = "\n".join(render_education(normalize_resume_record(full_resume), TODAY))

    assert text.count("B.S. Computer Science") == 1
    assert "program={B.S. Computer Science}" in text
    assert "grade={3.8 GPA}" in text
    assert r"\begin{educationSection}{Education}" in text


@pytest.mark.unit
def test_education_entry_without_values_is_dropped():
    """Test an all-empty education entry produces no command and no section."""
    record = ResumeRecord(education=[Education()])
    assert render_education(record, TODAY) == []


@pytest.mark.unit
def test_skills_grouped_by_category(full_resume):
    """Test one \\skillItem per distinct category with comma-joined names."""
    text = "\n".join(render_skills(normalize_resume_record(full_resume)))

    assert "category={Technical}, skills={Python, SQL, PostgreSQL}" in text
    assert "category={Cloud}, skills={AWS, Docker, Kubernetes}" in text
    assert text.count(r"\skillItem") == 2


@pytest.mark.unit
def test_experience_bullets_filtered():
    """Test blank bullets are dropped and an entry without bullets has no itemize."""
    record = normalize_resume_record(
        {
            "workExperience": [
                {"company": "Acme", "jobTitle": "Engineer", "responsibilities": ["  ", "Built\nAPIs"]},
                {"company": "Initech", "responsibilities": ["", "   "]},
            ]
        }
    )
    text = "\n".join(render_experience(record))

    assert r"\item Built APIs" in text
    assert text.count(r"\begin{itemize}") == 1
    assert "company={Initech}" in text


@pytest.mark.unit
def test_section_order(full_resume):
    """Test every populated section is emitted in the fixed order."""
    record = normalize_resume_record(
        {
            **full_resume,
            "certifications": [{"name": "AWS Solutions Architect", "issuer": "Amazon"}],
            "publications": [{"title": "Notes on the Analytical Engine"}],
            "languages": [{"name": "French", "proficiency": "fluent"}],
            "volunteerExperience": [{"organization": "Code Club", "role": "Mentor"}],
            "awards": [{"title": "Best Paper", "issuer": "ACM"}],
            "hobbies": [{"name": "Chess"}],
            "references": [{"name": "Charles Babbage", "title": "Mentor"}],
            "additionalSections": [{"title": "Patents", "content": "US 1,234"}],
            "trackingUrl": "https://example.com/r/ada",
        }
    )
    names = [name for name, _ in render_sections(record, TODAY)]

    assert names == [renderer.name for renderer in SECTION_RENDERERS]
    assert len(names) == 15


@pytest.mark.unit
def test_empty_resume_renders_placeholder():
    """Test a resume with no populated sections renders the empty-document placeholder."""
    assert render_resume_body(ResumeRecord(), TODAY) == EMPTY_DOCUMENT_PLACEHOLDER
    assert render_resume_body(normalize_resume_record({"skills": [], "education": None}), TODAY) == (
        EMPTY_DOCUMENT_PLACEHOLDER
    )


@pytest.mark.unit
def test_body_never_has_empty_arguments(full_resume):
    """Test no command receives an empty key-value argument."""
    body = render_resume_body(normalize_resume_record(full_resume), TODAY)

    assert "={}" not in body
    assert "[]" not in body


@pytest.mark.unit
def test_user_text_is_escaped(full_resume):
    """Test reserved characters in user text are escaped in the body."""
    body = render_resume_body(normalize_resume_record(full_resume), TODAY)

    assert r"products \& teams" in body
    assert r"by 40\% across" in body
    assert r"by \$120k" in body


@pytest.mark.unit
def test_certifications_block():
    """Test certifications render as project items with issuer and linked title."""
    record = ResumeRecord(
        certifications=[
            Certification(
                name="AWS_SA",
                issuer="Amazon & Co",
                date="03/2021",
                url="https://x.io/c#1",
                description="Solutions   architecture",
            ),
            Certification(name="  ", issuer=""),
        ]
    )

    assert render_certifications(record) == [
        "% --------- Certifications -----------",
        r"\begin{experienceSection}{Certifications}",
        r"    \projectItem[title={AWS\_SA (x.io/c\#1)}, duration={03/2021}, keyHighlight={Issued by Amazon \& Co}]",
        r"    \begin{itemize}",
        r"        \vspace{-0.5em}",
        r"        \itemsep -6pt {}",
        r"        \item Solutions architecture",
        r"    \end{itemize}",
        "",
        r"\end{experienceSection}",
        "",
    ]


@pytest.mark.unit
def test_publications_block():
    """Test publications show the publisher and the link without its scheme."""
    record = ResumeRecord(
        publications=[
            Publication(
                title="Notes on the Engine",
                publisher="Taylor's Scientific Memoirs",
                publication_date="1843",
                url="http://example.org/notes",
            )
        ]
    )
    lines = render_publications(record)

    assert lines[1] == r"\begin{experienceSection}{Publications}"
    assert (
        r"    \projectItem[title={Notes on the Engine (example.org/notes)}, duration={1843}, "
        r"keyHighlight={Published by Taylor's Scientific Memoirs}]"
    ) in lines
    assert r"    \begin{itemize}" not in lines


@pytest.mark.unit
def test_languages_grouped_by_proficiency():
    """Test languages are grouped by proficiency with a default group for unlabeled ones."""
    record = ResumeRecord(
        languages=[
            Language(name="French", proficiency="fluent"),
            Language(name="German", proficiency=""),
            Language(name="Spanish", proficiency="Fluent"),
            Language(name="", proficiency="native"),
        ]
    )

    assert render_languages(record) == [
        "% --------- Languages -----------",
        r"\begin{skillsSection}{Languages}",
        r"    \skillItem[category={Fluent}, skills={French, Spanish}] \\",
        r"    \skillItem[category={Languages}, skills={German}]",
        r"\end{skillsSection}",
        "",
    ]


@pytest.mark.unit
def test_volunteer_block():
    """Test volunteer roles render as experience items with description and achievements."""
    record = ResumeRecord(
        volunteer_experience=[
            VolunteerExperience(
                organization="Code Club",
                role="Mentor",
                location="London",
                start_date="01/2020",
                is_current_role=True,
                description="Weekly sessions",
                achievements=["Taught 30 students", "  "],
            )
        ]
    )
    lines = render_volunteer(record)

    assert lines[:3] == [
        "% --------- Other work experience -----------",
        r"\begin{experienceSection}{Other work experience}",
        r"    \experienceItem[company={Code Club}, location={London}, position={Mentor}, "
        r"duration={01/2020 -- Present}]",
    ]
    assert r"        \vspace{-0.2em}" in lines
    assert [line for line in lines if r"\item " in line] == [
        r"        \item Weekly sessions",
        r"        \item Taught 30 students",
    ]


@pytest.mark.unit
def test_volunteer_section_needs_organization_and_role():
    """Test the volunteer section is skipped when no entry has both an organization and a role."""
    record = ResumeRecord(
        volunteer_experience=[
            VolunteerExperience(organization="Code Club"),
            VolunteerExperience(role="Mentor"),
        ]
    )

    assert "volunteer" not in [name for name, _ in render_sections(record, TODAY)]


@pytest.mark.unit
def test_awards_block():
    """Test an award description repeating its title is dropped."""
    record = ResumeRecord(
        awards=[
            Award(title="Best Paper", issuer="ACM", date="2019", description="Best   Paper"),
            Award(title="Hackathon", description="First place of 40 teams"),
        ]
    )
    lines = render_awards(record)

    assert lines[1] == r"\begin{experienceSection}{Activities}"
    assert r"    \projectItem[title={Best Paper}, duration={2019}, keyHighlight={Issued by ACM}]" in lines
    assert r"    \projectItem[title={Hackathon}]" in lines
    assert [line for line in lines if r"\item " in line] == [r"        \item First place of 40 teams"]
    assert lines.count(r"    \begin{itemize}") == 1


@pytest.mark.unit
def test_hobbies_block():
    """Test hobbies render as a single skill line under Interests."""
    record = ResumeRecord(
        hobbies=[Hobby(name="Chess"), Hobby(name=" "), Hobby(name="Rock climbing & caving")]
    )

    assert render_hobbies(record) == [
        "% --------- Hobbies -----------",
        r"\begin{skillsSection}{Interests}",
        r"    \skillItem[category={Hobbies}, skills={Chess, Rock climbing \& caving}]",
        r"\end{skillsSection}",
        "",
    ]
    assert render_hobbies(ResumeRecord(hobbies=[Hobby(name="  ")])) == []


@pytest.mark.unit
def test_references_block():
    """Test references list contact details as bullets under the reference."""
    record = ResumeRecord(
        references=[
            Reference(
                name="Charles Babbage",
                title="Mentor",
                company="Difference Engine Ltd",
                email="cb@example.com",
                relationship="Former supervisor",
            )
        ]
    )
    lines = render_references(record)

    assert r"    \projectItem[title={Charles Babbage}, keyHighlight={Mentor, Difference Engine Ltd}]" in lines
    assert [line for line in lines if r"\item " in line] == [
        r"        \item Email: cb@example.com",
        r"        \item Relationship: Former supervisor",
    ]


@pytest.mark.unit
def test_additional_sections_block():
    """Test free-form sections get their own titled block and blank content is skipped."""
    record = ResumeRecord(
        additional_sections=[
            AdditionalSection(title="", content="Open to relocation 100%"),
            AdditionalSection(title="Patents", content="  "),
            AdditionalSection(title="Patents_2", content="US 1,234"),
        ]
    )

    assert render_additional_sections(record) == [
        "% --------- Additional Sections -----------",
        r"    \begin{experienceSection}{Additional Information}",
        r"    Open to relocation 100\%",
        r"    \end{experienceSection}",
        "",
        r"    \begin{experienceSection}{Patents\_2}",
        r"    US 1,234",
        r"    \end{experienceSection}",
        "",
        "",
    ]
