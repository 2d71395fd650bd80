#!/usr/bin/env python3
"""
Render a resume file to LaTeX.

Reads a resume in the JSON contract (YAML or JSON file), renders every section
into the requested template and writes the resulting .tex source. Unknown
template ids fall back to the default template.

Usage:
    python scripts/render_resume.py resume.yaml
    python scripts/render_resume.py resume.json --template template02 -o out/resume.tex
    python scripts/render_resume.py --list-templates
"""

import asyncio
from pathlib import Path
from typing import Optional

import typer
from typing_extensions import Annotated

from scribe.contexts.intake.normalizer import load_resume_file
from scribe.contexts.templating.exceptions import TemplateStoreError
from scribe.contexts.templating.latex_generator import generate_latex
from scribe.contexts.templating.logger import _log_success, setup_templating_logger
from scribe.contexts.templating.registries import TemplateRegistry

app = typer.Typer(help="Render a resume file to LaTeX.", add_completion=False)


def _print_templates(registry: TemplateRegistry) -> None:
    templates = asyncio.run(registry.list_templates())
    if not templates:
        typer.echo(f"No templates found in {registry.templates_path}")
        return
    typer.echo(f"\n=== Templates ({len(templates)}) ===")
    for info in templates:
        marker = " (default)" if info["id"] == registry.default_template_id else ""
        typer.echo(f"  {info['id']}{marker}: {info['name']} - {info['description']}")


@app.command()
def main(
    resume_file: Annotated[
        Optional[Path], typer.Argument(help="Resume file (.yaml, .yml or .json)")
    ] = None,
    template: Annotated[
        Optional[str], typer.Option("--template", "-t", help="Template id (default: template01)")
    ] = None,
    output: Annotated[
        Optional[Path], typer.Option("--output", "-o", help="Output .tex path (default: <resume>.tex)")
    ] = None,
    templates_path: Annotated[
        Optional[Path], typer.Option("--templates-path", help="Template store root")
    ] = None,
    list_templates: Annotated[
        bool, typer.Option("--list-templates", help="List available templates and exit")
    ] = False,
):
    """Render a resume to LaTeX."""
    registry = TemplateRegistry(templates_path=templates_path)

    if list_templates:
        _print_templates(registry)
        return

    if resume_file is None:
        typer.echo("ERROR: RESUME_FILE is required unless --list-templates is given", err=True)
        raise typer.Exit(1)
    if not resume_file.exists():
        typer.echo(f"ERROR: Resume file not found: {resume_file}", err=True)
        raise typer.Exit(1)

    log_file = setup_templating_logger(template_id=template or "")
    record = load_resume_file(resume_file)

    try:
        latex = asyncio.run(generate_latex(template, record, registry=registry))
    except TemplateStoreError as e:
        typer.echo(f"ERROR: {e}", err=True)
        raise typer.Exit(1)

    output = output or resume_file.with_suffix(".tex")
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(latex, encoding="utf-8")

    _log_success(f"Wrote {output} ({len(latex)} chars)")
    typer.echo(f"Log: {log_file}")
    typer.secho(f"\n✓ Rendered {resume_file.name} -> {output}", fg=typer.colors.GREEN)


if __name__ == "__main__":
    app()
