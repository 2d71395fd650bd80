"""
Templating Context

Responsibilities:
- Manages the structured resume representation (ResumeRecord)
- Escapes raw text into LaTeX-safe markup
- Renders resume sections into template-compatible LaTeX commands
- Resolves and caches document templates, falling back to the default template

Owns: Resume structure representation, LaTeX escaping, template system
Never: Makes scoring or content prioritization decisions

Document assembly (generate_latex) lives in latex_generator, which depends on
the Intake normalizer and is imported from its module directly.
"""

from scribe.contexts.templating.registries import TemplateAsset, TemplateCache, TemplateRegistry
from scribe.contexts.templating.resume_data_structure import ResumeRecord
from scribe.contexts.templating.section_renderer import render_resume_body

__all__ = [
    # Body rendering
    "render_resume_body",
    # Template resolution
    "TemplateAsset",
    "TemplateCache",
    "TemplateRegistry",
    # Data structure classes
    "ResumeRecord",
]
