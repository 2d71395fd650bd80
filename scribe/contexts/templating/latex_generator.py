"""
LaTeX Generator

Assembles a complete LaTeX document from a resume and a template id:
resolve skeleton -> render body -> inject shared command definitions
(non-default templates only) -> fill the content placeholder.
"""

import re
from datetime import date
from typing import Any, Mapping, Optional, Union

from scribe.contexts.intake.normalizer import normalize_resume_record
from scribe.contexts.templating.defaults import EMPTY_DOCUMENT_PLACEHOLDER
from scribe.contexts.templating.logger import _log_debug, log_render_result
from scribe.contexts.templating.registries import TemplateRegistry, get_template_registry
from scribe.contexts.templating.resume_data_structure import ResumeRecord
from scribe.contexts.templating.section_renderer import render_sections

_DOCUMENTCLASS_PATTERN = re.compile(r"^[ \t]*\\documentclass.*$", re.MULTILINE)


def inject_custom_commands(document: str, definitions: str) -> str:
    """
    Insert command definitions after the first \\documentclass line.

    Documents without a \\documentclass line get the definitions prepended.

    Args:
        document: LaTeX source
        definitions: Definitions block (returned unchanged when blank)

    Returns:
        LaTeX source with definitions injected
    """
    if not definitions.strip():
        return document

    match = _DOCUMENTCLASS_PATTERN.search(document)
    if match is None:
        return f"{definitions}\n{document}"
    return f"{document[: match.end()]}\n{definitions}{document[match.end():]}"


async def generate_latex(
    template_id: Optional[str],
    resume: Union[ResumeRecord, Mapping[str, Any]],
    registry: TemplateRegistry = None,
    today: Optional[date] = None,
) -> str:
    """
    Generate a complete LaTeX document for a resume.

    Args:
        template_id: Requested template (missing/invalid ids fall back to the default)
        resume: ResumeRecord or raw resume mapping (camelCase or snake_case)
        registry: Template registry (default: the process-wide registry)
        today: Reference date for graduation display (default: date.today())

    Returns:
        LaTeX document with exactly one content region filled

    Raises:
        TemplateStoreError: Default template could not be loaded
    """
    registry = registry or get_template_registry()
    record = normalize_resume_record(resume)

    asset = await registry.resolve(template_id)

    sections = render_sections(record, today)
    body = "\n".join(line for _, lines in sections for line in lines) or EMPTY_DOCUMENT_PLACEHOLDER

    document = asset.render(body)

    # The default template defines its own commands
    if asset.template_id != registry.default_template_id:
        document = inject_custom_commands(document, await registry.load_custom_commands())
        _log_debug(f"Injected shared command definitions into '{asset.template_id}'")

    log_render_result(asset.template_id, [name for name, _ in sections], len(document))
    return document
