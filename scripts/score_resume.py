#!/usr/bin/env python3
"""
Score resumes against job postings.

Commands:
    quality   Structural completeness of a resume (no job needed)
    match     Job match score (AI judgment when a provider is configured,
              heuristic fallback otherwise)
    suggest   Section-by-section diff between an original and optimized resume

Usage:
    python scripts/score_resume.py quality resume.yaml
    python scripts/score_resume.py match resume.yaml --job job.txt
    python scripts/score_resume.py match resume.yaml --job job.txt --requirements reqs.yaml --no-ai
    python scripts/score_resume.py suggest original.yaml optimized.yaml
"""

import asyncio
import json
from pathlib import Path
from typing import Optional

import typer
from omegaconf import OmegaConf
from typing_extensions import Annotated

from scribe.contexts.intake.job_data_structure import JobRequirement
from scribe.contexts.intake.normalizer import load_resume_file
from scribe.contexts.targeting.content_quality import assess_content_quality
from scribe.contexts.targeting.logger import setup_targeting_logger
from scribe.contexts.targeting.match_scoring import calculate_job_match
from scribe.contexts.targeting.scoring_config import get_scoring_config, load_scoring_config
from scribe.contexts.targeting.suggestions import generate_enhancement_suggestions
from scribe.utils.llm import try_get_provider

app = typer.Typer(help="Score resumes against job postings.", add_completion=False)


def _require_file(path: Path, label: str) -> None:
    if not path.exists():
        typer.echo(f"ERROR: {label} not found: {path}", err=True)
        raise typer.Exit(1)


def _echo_list(title: str, items: list) -> None:
    typer.echo(f"\n=== {title} ({len(items)}) ===")
    typer.echo("\n".join(f"  - {item}" for item in items) if items else "  None")


@app.command()
def quality(
    resume_file: Annotated[Path, typer.Argument(help="Resume file (.yaml, .yml or .json)")],
):
    """Assess structural completeness of a resume."""
    _require_file(resume_file, "Resume file")
    record = load_resume_file(resume_file)
    assessment = assess_content_quality(record)

    color = typer.colors.GREEN if assessment.score >= get_scoring_config().quality_threshold else typer.colors.YELLOW
    typer.secho(f"Content quality: {assessment.score}/100", fg=color)
    _echo_list("Issues", assessment.issues)
    _echo_list("Strengths", assessment.strengths)


@app.command()
def match(
    resume_file: Annotated[Path, typer.Argument(help="Resume file (.yaml, .yml or .json)")],
    job: Annotated[Path, typer.Option("--job", "-j", help="Job description text file")],
    requirements: Annotated[
        Optional[Path],
        typer.Option("--requirements", "-r", help="Pre-extracted requirements (YAML/JSON, camelCase keys)"),
    ] = None,
    scoring_config: Annotated[
        Optional[Path], typer.Option("--scoring-config", help="Scoring calibration overlay (YAML)")
    ] = None,
    no_ai: Annotated[bool, typer.Option("--no-ai", help="Skip the AI provider; use heuristics")] = False,
    as_json: Annotated[bool, typer.Option("--json", help="Print the full result as JSON")] = False,
):
    """Score how well a resume matches a job description."""
    _require_file(resume_file, "Resume file")
    _require_file(job, "Job file")

    log_file = setup_targeting_logger(job_source=str(job))
    record = load_resume_file(resume_file)
    job_text = job.read_text(encoding="utf-8")

    requirement = None
    if requirements is not None:
        _require_file(requirements, "Requirements file")
        data = OmegaConf.to_container(OmegaConf.load(requirements), resolve=False)
        if not isinstance(data, dict):
            typer.echo(f"ERROR: Requirements file must hold a mapping: {requirements}", err=True)
            raise typer.Exit(1)
        requirement = JobRequirement.from_dict(data)

    config = load_scoring_config(scoring_config) if scoring_config else None
    provider = None if no_ai else try_get_provider()

    result = asyncio.run(
        calculate_job_match(
            record, job_text, job_requirement=requirement, provider=provider, config=config
        )
    )

    if as_json:
        typer.echo(json.dumps(result.to_dict(), indent=2))
        return

    typer.echo(f"\n=== Job Match ({result.mode}, confidence: {result.confidence}) ===")
    typer.echo(f"  Overall:    {result.overall_match}%")
    typer.echo(f"  Skills:     {result.skills_match}%")
    typer.echo(f"  Experience: {result.experience_match}%")
    typer.echo(f"  ATS:        {result.ats_compatibility}%")
    if result.failure_reason:
        typer.echo(f"  AI failure: {result.failure_reason} {result.provider_failures}")
    _echo_list("Matching skills", result.matching_skills)
    _echo_list("Missing skills", result.missing_skills)
    _echo_list("Recommendations", result.recommendations)
    typer.echo(f"\nLog: {log_file}")


@app.command()
def suggest(
    original_file: Annotated[Path, typer.Argument(help="Original resume file")],
    optimized_file: Annotated[Path, typer.Argument(help="Optimized resume file")],
):
    """Show section-by-section changes between two versions of a resume."""
    _require_file(original_file, "Original resume file")
    _require_file(optimized_file, "Optimized resume file")

    sections = generate_enhancement_suggestions(
        load_resume_file(original_file), load_resume_file(optimized_file)
    )
    changed = [name for name, section in sections.items() if section.has_changes]
    if not changed:
        typer.secho("No changes detected", fg=typer.colors.GREEN)
        return

    for name in changed:
        typer.echo(f"\n=== {name} ===")
        for suggestion in sections[name].suggestions:
            typer.echo(f"  [{suggestion.type}] {suggestion.field}: {suggestion.reason}")


if __name__ == "__main__":
    app()
