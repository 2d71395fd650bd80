"""
Default values for SCRIBE document rendering.

Provides shared defaults used by:
- registries.py (template store location, fallback template id)
- section_renderer.py (section titles, list spacing, empty-document placeholder)
- latex_generator.py (placeholder name, shared command definitions file)
"""

import os
from pathlib import Path
from typing import Dict

from dotenv import load_dotenv

load_dotenv()

# Template store (one subdirectory per template id)
TEMPLATES_PATH = Path(
    os.getenv("SCRIBE_TEMPLATES_PATH", str(Path(__file__).parent / "template"))
)
DEFAULT_TEMPLATE_ID = os.getenv("SCRIBE_DEFAULT_TEMPLATE", "template01")

# Skeleton file naming: <TEMPLATES_PATH>/<id>/<id>.tex.jinja
TEMPLATE_SUFFIX = ".tex.jinja"
TEMPLATE_CONFIG_SUFFIX = "-config.yaml"

# Name of the single Jinja variable a skeleton must contain
CONTENT_PLACEHOLDER = "content"

# Shared \introduction/\educationItem/... definitions injected into non-default templates
# (relative to the template store root)
CUSTOM_COMMANDS_FILE = Path("structure") / "custom_commands.tex"

# Section titles as rendered in the document
SECTION_TITLES: Dict[str, str] = {
    "education": "Education",
    "skills": "Technical Skills",
    "experience": "Professional Experience",
    "projects": "Projects",
    "certifications": "Certifications",
    "publications": "Publications",
    "languages": "Languages",
    "volunteer": "Other work experience",
    "awards": "Activities",
    "hobbies": "Interests",
    "references": "References",
}

# Labels used when an entry has no category/proficiency of its own
DEFAULT_SKILL_CATEGORY = "General"
DEFAULT_LANGUAGE_GROUP = "Languages"
HOBBIES_CATEGORY = "Hobbies"

# Vertical spacing emitted at the top of bullet lists, by section
LIST_SPACING: Dict[str, str] = {
    "experience": "",
    "projects": r"\vspace{-0.5em}",
    "entries": r"\vspace{-0.5em}",
    "volunteer": r"\vspace{-0.2em}",
}
LIST_ITEMSEP = r"\itemsep -6pt {}"

TRACKING_FOOTER_TEXT = "View the latest version of this resume at"

# Emitted instead of an empty body so the compiler always receives content
EMPTY_DOCUMENT_PLACEHOLDER = "\n".join(
    [
        "% (intentionally left blank: no resume fields provided)",
        r"\begin{center}",
        r"  \Large Resume Data Not Provided",
        r"  \\ \vspace{1em}",
        r"  \small Please fill in your details to generate a preview.",
        r"\end{center}",
    ]
)
