"""
Job optimization orchestration.

Runs the full job-targeted flow for one resume:

    job (URL or text) -> JobRequirement
    resume + job -> ContentEnhancer -> optimized resume
    optimized resume -> LaTeX  } concurrently
    optimized resume -> match  }
    original vs optimized -> suggestions

The content enhancer is an external collaborator. ProviderContentEnhancer is
the LLM-backed implementation; any object implementing ContentEnhancer works.
"""

import asyncio
import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Union

from scribe.contexts.intake.job_analysis import analyze_job_from_url, analyze_job_posting
from scribe.contexts.intake.job_data_structure import JobRequirement
from scribe.contexts.intake.normalizer import normalize_resume_record
from scribe.contexts.targeting.logger import _log_info, _log_success, _log_warning
from scribe.contexts.targeting.match_result import MatchResult
from scribe.contexts.targeting.match_scoring import calculate_job_match, coerce_score, round_half_up
from scribe.contexts.targeting.suggestions import (
    OptimizationSuggestion,
    generate_optimization_suggestions,
)
from scribe.contexts.templating.latex_generator import generate_latex
from scribe.contexts.templating.registries import TemplateRegistry
from scribe.contexts.templating.resume_data_structure import ResumeRecord
from scribe.utils.llm import LLMProvider, coerce_string_list, parse_json_response


@dataclass
class EnhancementResult:
    """
    Output of a ContentEnhancer.

    Attributes:
        enhanced_content: Optimized resume
        improvements: Human-readable list of changes made
        keywords_added: Job keywords woven into the resume
        ats_score: Enhancer's own ATS estimate (0-100), if it reports one
    """

    enhanced_content: ResumeRecord
    improvements: List[str] = field(default_factory=list)
    keywords_added: List[str] = field(default_factory=list)
    ats_score: Optional[int] = None


class ContentEnhancer(ABC):
    """Collaborator that rewrites resume content for a target job."""

    @abstractmethod
    async def optimize_for_job(
        self,
        resume: ResumeRecord,
        job_description: str,
        target_role: Optional[str] = None,
    ) -> EnhancementResult:
        pass


_ENHANCER_SYSTEM_PROMPT = """\
You are an expert resume writer. Rewrite resume content to target a specific job
without inventing employers, dates, degrees or credentials.
Return ONLY valid JSON, with no text before or after the object."""

_ENHANCER_PROMPT_TEMPLATE = """\
Optimize this resume for the target job.

TARGET ROLE: {target_role}

JOB DESCRIPTION:
{job_description}

RESUME (JSON):
{resume_json}

Rules:
- Keep every employer, institution, date and title factual
- Strengthen bullet points with action verbs and quantified results already implied by the content
- Use the job posting's terminology where the resume already demonstrates the skill

Return JSON with exactly these fields:
{{
  "enhancedContent": {{ ...same shape as the input resume... }},
  "improvements": ["change1", "change2"],
  "keywordsAdded": ["keyword1", "keyword2"],
  "atsScore": [SCORE 0-100]
}}"""


class ProviderContentEnhancer(ContentEnhancer):
    """
    LLM-backed content enhancer.

    Raises on provider failure or an unusable response; optimize_resume_for_job
    treats any enhancer exception as "no optimization".
    """

    def __init__(self, provider: LLMProvider, max_job_chars: int = 6000):
        self.provider = provider
        self.max_job_chars = max_job_chars

    async def optimize_for_job(self, resume, job_description, target_role=None):
        prompt = _ENHANCER_PROMPT_TEMPLATE.format(
            target_role=target_role or "Not specified",
            job_description=(job_description or "Not provided")[: self.max_job_chars],
            resume_json=json.dumps(resume.to_dict(), indent=2),
        )
        response = await self.provider.generate(
            system_prompt=_ENHANCER_SYSTEM_PROMPT, user_prompt=prompt
        )

        parsed = parse_json_response(response.content)
        if not parsed.ok:
            raise ValueError(f"Unusable enhancement response: {parsed.error}")
        enhanced = parsed.data.get("enhancedContent")
        if not isinstance(enhanced, dict):
            raise ValueError("Enhancement response has no enhancedContent object")

        ats_score = coerce_score(parsed.data.get("atsScore"), default=None)
        return EnhancementResult(
            enhanced_content=normalize_resume_record(enhanced),
            improvements=coerce_string_list(parsed.data.get("improvements")),
            keywords_added=coerce_string_list(parsed.data.get("keywordsAdded")),
            ats_score=round_half_up(ats_score) if ats_score is not None else None,
        )


@dataclass
class OptimizationRequest:
    """
    One job-targeted optimization request.

    Exactly one of job_description/job_url is normally set; when both are, the
    URL analysis wins and job_description is kept as the scoring text fallback.
    """

    resume: Union[ResumeRecord, Mapping[str, Any]]
    job_description: str = ""
    job_url: Optional[str] = None
    job_title: Optional[str] = None
    company_name: Optional[str] = None
    template_id: Optional[str] = None


@dataclass
class OptimizationResult:
    original_resume: ResumeRecord
    optimized_resume: ResumeRecord
    optimized_latex: str
    improvements: List[str]
    keywords_added: List[str]
    ats_score: int
    optimization_suggestions: List[OptimizationSuggestion]
    job_match: MatchResult
    job_requirement: JobRequirement
    scraped_job_details: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "originalResume": self.original_resume.to_dict(),
            "optimizedResume": self.optimized_resume.to_dict(),
            "optimizedLatex": self.optimized_latex,
            "improvements": list(self.improvements),
            "keywordsAdded": list(self.keywords_added),
            "atsScore": self.ats_score,
            "optimizationSuggestions": [s.to_dict() for s in self.optimization_suggestions],
            "jobMatchAnalysis": self.job_match.to_dict(),
        }
        if self.scraped_job_details is not None:
            data["scrapedJobDetails"] = self.scraped_job_details
        return data


async def optimize_resume_for_job(
    request: OptimizationRequest,
    enhancer: Optional[ContentEnhancer] = None,
    provider: Optional[LLMProvider] = None,
    registry: Optional[TemplateRegistry] = None,
) -> OptimizationResult:
    """
    Optimize a resume for a job and report what changed.

    Args:
        request: Resume plus job text or URL
        enhancer: Content rewriting collaborator (None keeps the original content)
        provider: AI collaborator for job analysis and match scoring
        registry: Template registry for markup generation

    Returns:
        OptimizationResult

    Raises:
        TemplateStoreError: Default template could not be loaded
    """
    original = normalize_resume_record(request.resume)

    # 1. Job requirements
    scraped_details = None
    job_text = request.job_description or ""
    if request.job_url:
        _log_info(f"Analyzing job posting URL: {request.job_url}")
        requirement = await analyze_job_from_url(request.job_url, provider=provider)
        scraped_details = {
            "jobTitle": requirement.job_title or request.job_title,
            "companyName": requirement.company_name or request.company_name,
            "jobDescription": requirement.job_description,
        }
        job_text = requirement.job_description or job_text
    else:
        requirement = await analyze_job_posting(job_text, request.job_title, provider=provider)

    # 2. Content enhancement (degrades to the original resume)
    target_role = request.job_title or (scraped_details or {}).get("jobTitle")
    enhancement = EnhancementResult(enhanced_content=original)
    if enhancer is not None:
        try:
            enhancement = await enhancer.optimize_for_job(original, job_text, target_role)
        except Exception as e:
            _log_warning(f"Content enhancement failed, keeping original content: {e}")
    optimized = enhancement.enhanced_content

    # 3. Markup and match scoring are independent
    latex, match = await asyncio.gather(
        generate_latex(request.template_id, optimized, registry=registry),
        calculate_job_match(optimized, job_text, job_requirement=requirement, provider=provider),
    )

    # 4. Suggestions
    suggestions = generate_optimization_suggestions(original, optimized, requirement)

    ats_score = enhancement.ats_score if enhancement.ats_score is not None else match.ats_compatibility
    _log_success(
        f"Optimization complete: match {match.overall_match}%, "
        f"{len(enhancement.improvements)} improvements, {len(suggestions)} suggestions"
    )
    return OptimizationResult(
        original_resume=original,
        optimized_resume=optimized,
        optimized_latex=latex,
        improvements=enhancement.improvements,
        keywords_added=enhancement.keywords_added,
        ats_score=ats_score,
        optimization_suggestions=suggestions,
        job_match=match,
        job_requirement=requirement,
        scraped_job_details=scraped_details,
    )
