"""
LLM provider abstraction and response parsing utilities.

Provides a provider-agnostic async interface for LLM API calls and utilities for
parsing structured JSON responses that may be wrapped in code fences, padded with
prose, or truncated mid-object.
"""

import json
import os
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional

from dotenv import load_dotenv
from loguru import logger

load_dotenv()

MAX_TOKENS = 2048

# Failure reasons attached to fallback results (checked in this order)
_FAILURE_PATTERNS = (
    ("ai_quota", "quota", ("quota", "resource_exhausted", "ai_quota_exceeded")),
    ("ai_invalid_key", "invalid_key", ("invalid api key", "invalid x-api-key", "authentication")),
    ("ai_rate_limit", "rate_limit", ("rate limit", "429")),
)
DEFAULT_FAILURE_REASON = "ai_unavailable"


# --- LLM Provider Classes ---


@dataclass
class LLMResponse:
    """Response from an LLM provider."""

    content: str
    model: str
    input_tokens: int
    output_tokens: int


class LLMProvider(ABC):
    """
    Abstract base for LLM providers.

    Subclasses must:
    - Set _provider_prefix class attribute (e.g., "anthropic", "openai")
    - Implement _call_api() for the actual API call
    - Call update_model(model) in __init__ to set model and name

    No timeout or retry policy lives here; callers own both.
    """

    _provider_prefix: str

    name: str
    model: str

    def update_model(self, model: str):
        """Update the model and refresh the provider name."""
        self.model = model
        self.name = f"{self._provider_prefix}/{model}"

    @property
    def provider_prefix(self) -> str:
        return self._provider_prefix

    @abstractmethod
    async def _call_api(self, system_prompt: str, user_prompt: str) -> LLMResponse:
        """Make a single API call. Implemented by subclasses."""
        pass

    async def generate(self, system_prompt: str, user_prompt: str) -> LLMResponse:
        """Generate a response from the LLM."""
        response = await self._call_api(system_prompt, user_prompt)
        logger.debug(
            f"{self.name}: {response.input_tokens} input / {response.output_tokens} output tokens"
        )
        return response


class AnthropicProvider(LLMProvider):
    """Anthropic Claude provider using the async client."""

    _provider_prefix = "anthropic"

    def __init__(self, model: str = "claude-sonnet-4-20250514"):
        # Lazy import - anthropic SDK is heavy, only load if this provider is used
        try:
            import anthropic
        except ImportError:
            raise ImportError("anthropic package required. Install with: pip install anthropic")

        api_key = os.getenv("ANTHROPIC_API_KEY")
        if not api_key:
            raise ValueError("ANTHROPIC_API_KEY environment variable not set")

        self.client = anthropic.AsyncAnthropic(api_key=api_key)
        self.update_model(model)

    async def _call_api(self, system_prompt: str, user_prompt: str) -> LLMResponse:
        response = await self.client.messages.create(
            model=self.model,
            max_tokens=MAX_TOKENS,
            system=system_prompt,
            messages=[{"role": "user", "content": user_prompt}],
        )
        return LLMResponse(
            content=response.content[0].text,
            model=self.model,
            input_tokens=response.usage.input_tokens,
            output_tokens=response.usage.output_tokens,
        )


class OpenAIProvider(LLMProvider):
    """OpenAI GPT provider using the async client."""

    _provider_prefix = "openai"

    def __init__(self, model: str = "gpt-4o-mini"):
        # Lazy import - openai SDK is heavy, only load if this provider is used
        try:
            import openai
        except ImportError:
            raise ImportError("openai package required. Install with: pip install openai")

        api_key = os.getenv("OPENAI_API_KEY")
        if not api_key:
            raise ValueError("OPENAI_API_KEY environment variable not set")

        # Retries disabled: the calling layer owns retry policy
        self.client = openai.AsyncOpenAI(api_key=api_key, max_retries=0)
        self.update_model(model)

    async def _call_api(self, system_prompt: str, user_prompt: str) -> LLMResponse:
        response = await self.client.chat.completions.create(
            model=self.model,
            max_tokens=MAX_TOKENS,
            temperature=0.2,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
        )
        return LLMResponse(
            content=response.choices[0].message.content or "",
            model=self.model,
            input_tokens=response.usage.prompt_tokens,
            output_tokens=response.usage.completion_tokens,
        )


# --- Provider Factory ---


def get_provider(provider_name: str = None, model: str = None) -> LLMProvider:
    """
    Get an LLM provider instance.

    Args:
        provider_name: "anthropic" or "openai" (default: from LLM_PROVIDER env var)
        model: Model name (default: LLM_MODEL env var, then provider-specific default)

    Returns:
        LLMProvider instance

    Raises:
        ValueError: Unknown provider or missing API key
        ImportError: Provider SDK not installed
    """
    if provider_name is None:
        provider_name = os.getenv("LLM_PROVIDER", "openai").lower()
    if model is None:
        model = os.getenv("LLM_MODEL") or None

    if provider_name == "anthropic":
        return AnthropicProvider(model=model) if model else AnthropicProvider()
    elif provider_name == "openai":
        return OpenAIProvider(model=model) if model else OpenAIProvider()
    else:
        raise ValueError(f"Unknown provider: {provider_name}. Use 'anthropic' or 'openai'")


def try_get_provider(provider_name: str = None, model: str = None) -> Optional[LLMProvider]:
    """
    Get an LLM provider, or None when none is configured.

    Scoring and extraction treat a missing provider as "AI unavailable" and run
    their heuristic paths instead.
    """
    try:
        return get_provider(provider_name=provider_name, model=model)
    except (ValueError, ImportError) as e:
        logger.warning(f"LLM provider unavailable: {e}")
        return None


def classify_failure(error: BaseException, provider_prefix: str = "ai") -> tuple[str, list[str]]:
    """
    Classify an AI call failure from its error text.

    Args:
        error: Exception raised by the provider call
        provider_prefix: Provider name used to tag provider-specific failures

    Returns:
        (failure_reason, provider_failures), e.g. ("ai_quota", ["openai_quota"]).
        Unrecognized errors yield ("ai_unavailable", []).

    Example:
        >>> classify_failure(RuntimeError("429 Too Many Requests"), "openai")
        ('ai_rate_limit', ['openai_rate_limit'])
    """
    message = str(error).lower()
    for reason, suffix, needles in _FAILURE_PATTERNS:
        if any(needle in message for needle in needles):
            return reason, [f"{provider_prefix}_{suffix}"]
    return DEFAULT_FAILURE_REASON, []


# --- Response Parsing Utilities ---


@dataclass(frozen=True)
class JSONParseResult:
    """
    Outcome of parsing an LLM response at the parse boundary.

    Exactly one of data/error is set. Callers must check ok before trusting data.

    Attributes:
        data: Parsed JSON object
        error: Parse failure description
        repaired: True when brace-balance repair was needed to parse
    """

    data: Optional[dict] = None
    error: Optional[str] = None
    repaired: bool = False

    @property
    def ok(self) -> bool:
        return self.data is not None


def strip_code_fences(text: str) -> str:
    """Remove a leading ```/```json fence and a trailing ``` fence."""
    text = text.strip()
    text = re.sub(r"^```(?:json)?\s*\n?", "", text)
    text = re.sub(r"\n?\s*```\s*$", "", text)
    return text.strip()


def extract_json_object(text: str) -> str:
    """
    Extract the outermost {...} span from text.

    When no closing brace follows the first opening brace (truncated output),
    returns everything from the first opening brace so repair can complete it.
    Returns the text unchanged when it contains no opening brace.
    """
    start = text.find("{")
    if start == -1:
        return text
    end = text.rfind("}")
    if end > start:
        return text[start : end + 1]
    return text[start:]


def repair_json(text: str) -> str:
    """
    Apply one bounded repair pass to malformed JSON.

    Removes trailing commas before closing braces/brackets, normalizes whitespace,
    and when the text does not end with a closing brace, strips a trailing comma
    and appends the missing closing braces.

    Example:
        >>> repair_json('{"overallMatch": 80, "skillsMatch": 70')
        '{"overallMatch": 80, "skillsMatch": 70}'
    """
    fixed = re.sub(r",\s*}", "}", text)
    fixed = re.sub(r",\s*]", "]", fixed)
    fixed = re.sub(r"\s+", " ", fixed).strip()

    if not fixed.endswith("}") and "{" in fixed:
        missing_braces = fixed.count("{") - fixed.count("}")
        if missing_braces > 0:
            fixed = re.sub(r",\s*$", "", fixed) + "}" * missing_braces

    return fixed


def parse_json_response(text: Optional[str]) -> JSONParseResult:
    """
    Parse a JSON object from an LLM response.

    Strips code fences, extracts the outermost object span, and on failure makes a
    single brace-balance repair attempt before giving up.

    Args:
        text: Raw LLM response text

    Returns:
        JSONParseResult with data on success, error on failure
    """
    if not text or not text.strip():
        return JSONParseResult(error="empty response")

    candidate = extract_json_object(strip_code_fences(text))

    try:
        parsed = json.loads(candidate)
        repaired = False
    except json.JSONDecodeError as first_error:
        logger.debug(f"JSON parse failed ({first_error}), attempting repair")
        try:
            parsed = json.loads(repair_json(candidate))
            repaired = True
        except json.JSONDecodeError as second_error:
            return JSONParseResult(error=f"unparseable JSON after repair: {second_error}")

    if not isinstance(parsed, dict):
        return JSONParseResult(error=f"expected JSON object, got {type(parsed).__name__}")

    return JSONParseResult(data=parsed, repaired=repaired)


def strip_markdown_emphasis(value: Any) -> Any:
    """Recursively remove **bold** and *italic* markers from strings in a JSON value."""
    if isinstance(value, str):
        value = re.sub(r"\*\*(.*?)\*\*", r"\1", value)
        return re.sub(r"\*(.*?)\*", r"\1", value).strip()
    if isinstance(value, list):
        return [strip_markdown_emphasis(item) for item in value]
    if isinstance(value, dict):
        return {key: strip_markdown_emphasis(item) for key, item in value.items()}
    return value


def coerce_string_list(value: Any) -> list[str]:
    """Coerce a JSON value into a list of non-empty strings."""
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        return []
    items = []
    for item in value:
        if item is None or isinstance(item, (dict, list)):
            continue
        text = str(item).strip()
        if text:
            items.append(text)
    return items
