"""Shared fixtures: YAML resume fixtures, a scripted AI provider and throwaway template stores."""

from datetime import date
from pathlib import Path

import pytest
from omegaconf import OmegaConf

from scribe.contexts.targeting.scoring_config import ScoringConfig
from scribe.contexts.templating.registries import TemplateCache, TemplateRegistry
from scribe.utils.llm import LLMProvider, LLMResponse

FIXTURES_PATH = Path(__file__).parent / "fixtures"

# Fixed reference date so years-of-experience and graduation display are stable
TODAY = date(2024, 1, 1)


def load_fixture(name: str) -> dict:
    """Load a YAML fixture as a plain dict (no interpolation)."""
    return OmegaConf.to_container(OmegaConf.load(FIXTURES_PATH / name), resolve=False)


class FakeProvider(LLMProvider):
    """
    Scripted LLM provider.

    Returns queued responses in order (empty string once exhausted), or raises
    the configured error on every call. Records every (system, user) prompt pair.
    """

    _provider_prefix = "fake"

    def __init__(self, responses=None, error: Exception = None):
        self.responses = list(responses or [])
        self.error = error
        self.calls = []
        self.update_model("scripted")

    async def _call_api(self, system_prompt: str, user_prompt: str) -> LLMResponse:
        self.calls.append((system_prompt, user_prompt))
        if self.error is not None:
            raise self.error
        content = self.responses.pop(0) if self.responses else ""
        return LLMResponse(
            content=content,
            model=self.model,
            input_tokens=len(user_prompt) // 4,
            output_tokens=len(content) // 4,
        )


@pytest.fixture
def fake_provider():
    """Factory for scripted providers: fake_provider(responses=[...]) or fake_provider(error=...)."""
    return FakeProvider


@pytest.fixture
def full_resume() -> dict:
    return load_fixture("resume_full.yaml")


@pytest.fixture
def thin_resume() -> dict:
    return load_fixture("resume_thin.yaml")


@pytest.fixture
def job_requirements() -> dict:
    return load_fixture("job_requirements.yaml")


@pytest.fixture
def job_posting() -> str:
    return (FIXTURES_PATH / "job_posting.txt").read_text(encoding="utf-8")


@pytest.fixture
def scoring_config() -> ScoringConfig:
    """Default calibration, independent of SCRIBE_SCORING_CONFIG."""
    return ScoringConfig()


@pytest.fixture
def registry() -> TemplateRegistry:
    """Registry over the bundled templates with a fresh cache."""
    return TemplateRegistry(cache=TemplateCache(), default_template_id="template01")


@pytest.fixture
def template_store(tmp_path) -> Path:
    """
    Minimal template store:

    - basic: default-style skeleton with \\documentclass
    - bare: skeleton without \\documentclass
    - twoslots: invalid (two content placeholders)
    - structure/custom_commands.tex: shared definitions
    """
    skeletons = {
        "basic": "\\documentclass{article}\n\\begin{document}\n<<< content >>>\n\\end{document}\n",
        "bare": "\\begin{document}\n<<< content >>>\n\\end{document}\n",
        "twoslots": "<<< content >>>\n<<< content >>>\n",
    }
    for template_id, source in skeletons.items():
        directory = tmp_path / template_id
        directory.mkdir()
        (directory / f"{template_id}.tex.jinja").write_text(source, encoding="utf-8")

    (tmp_path / "basic" / "basic-config.yaml").write_text(
        "name: Basic\ndescription: Minimal test skeleton.\ncategory: test\n", encoding="utf-8"
    )
    (tmp_path / "structure").mkdir()
    (tmp_path / "structure" / "custom_commands.tex").write_text(
        "% shared commands\n\\providecommand{\\summary}[1]{#1}\n", encoding="utf-8"
    )
    return tmp_path


@pytest.fixture
def store_registry(template_store) -> TemplateRegistry:
    return TemplateRegistry(
        templates_path=template_store, cache=TemplateCache(), default_template_id="basic"
    )


@pytest.fixture
def today() -> date:
    return TODAY
