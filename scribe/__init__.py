"""
SCRIBE - Structured Candidate Resume Interpretation, Bounded Evaluation

A domain-driven resume toolkit that renders structured resume records into LaTeX
markup and scores resumes against job postings with quality-capped confidence.

Architecture:
- Intake Context: Resume record normalization and job requirement extraction
- Templating Context: LaTeX escaping, section rendering, template resolution
- Targeting Context: Content quality, job match scoring, enhancement suggestions
"""

__version__ = "0.1.0"
