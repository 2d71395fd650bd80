"""Unit tests for LLM response parsing, failure classification and provider selection."""

import pytest

from scribe.utils.llm import (
    OpenAIProvider,
    classify_failure,
    coerce_string_list,
    extract_json_object,
    get_provider,
    parse_json_response,
    repair_json,
    strip_code_fences,
    strip_markdown_emphasis,
    try_get_provider,
)


@pytest.mark.unit
def test_parse_plain_json():
    """Test a clean JSON object parses without repair."""
    result = parse_json_response('{"overallMatch": 80}')

    assert result.ok
    assert result.data == {"overallMatch": 80}
    assert result.repaired is False


@pytest.mark.unit
def test_parse_fenced_json_with_prose():
    """Test code fences and surrounding prose are stripped."""
    text = 'Here you go:\n```json\n{"skillsMatch": 70, "missingSkills": ["Go"]}\n```'
    result = parse_json_response(text)

    assert result.ok
    assert result.data["missingSkills"] == ["Go"]


@pytest.mark.unit
def test_truncated_json_is_repaired():
    """Test a truncated object gets its closing brace appended."""
    result = parse_json_response('{"overallMatch": 80, "skillsMatch": 70')

    assert result.ok
    assert result.repaired is True
    assert result.data == {"overallMatch": 80, "skillsMatch": 70}


@pytest.mark.unit
def test_trailing_comma_is_repaired():
    """Test trailing commas before closers are removed."""
    result = parse_json_response('{"a": [1, 2,], "b": 3,}')
    assert result.ok
    assert result.data == {"a": [1, 2], "b": 3}


@pytest.mark.unit
@pytest.mark.parametrize("text", ["", "   ", "no json here", '["a", "b"]', '{"a": [1, 2'])
def test_unparseable_responses(text):
    """Test unusable responses return an error instead of raising."""
    result = parse_json_response(text)

    assert not result.ok
    assert result.data is None
    assert result.error


@pytest.mark.unit
def test_repair_json_appends_missing_braces():
    """Test repair balances nested open braces and drops a trailing comma."""
    assert repair_json('{"a": {"b": 1,') == '{"a": {"b": 1}}'


@pytest.mark.unit
def test_fence_and_span_helpers():
    """Test the individual parse steps."""
    assert strip_code_fences("```\n{}\n```") == "{}"
    assert extract_json_object('x {"a": 1} y') == '{"a": 1}'
    assert extract_json_object('x {"a": 1') == '{"a": 1'


@pytest.mark.unit
@pytest.mark.parametrize(
    "message, reason, tag",
    [
        ("You exceeded your current quota", "ai_quota", ["openai_quota"]),
        ("Error 401: Invalid API key provided", "ai_invalid_key", ["openai_invalid_key"]),
        ("429 Too Many Requests", "ai_rate_limit", ["openai_rate_limit"]),
        ("Rate limit reached for requests", "ai_rate_limit", ["openai_rate_limit"]),
        ("Connection reset by peer", "ai_unavailable", []),
    ],
)
def test_classify_failure(message, reason, tag):
    """Test failure reasons are classified from the error text."""
    assert classify_failure(RuntimeError(message), "openai") == (reason, tag)


@pytest.mark.unit
def test_strip_markdown_emphasis_recurses():
    """Test bold/italic markers are removed throughout a JSON value."""
    value = {"strongPoints": ["**Python** expert", "*Led* teams"], "overallMatch": 70}
    assert strip_markdown_emphasis(value) == {
        "strongPoints": ["Python expert", "Led teams"],
        "overallMatch": 70,
    }


@pytest.mark.unit
def test_coerce_string_list():
    """Test JSON values coerce to lists of non-empty strings."""
    assert coerce_string_list("Python") == ["Python"]
    assert coerce_string_list(["a", "", None, 3, {"x": 1}]) == ["a", "3"]
    assert coerce_string_list(None) == []


# --- Provider factory ---


@pytest.mark.unit
def test_get_provider_rejects_unknown_name():
    """Test an unknown provider name is a configuration error."""
    with pytest.raises(ValueError, match="Unknown provider"):
        get_provider("bard")


@pytest.mark.unit
def test_get_provider_uses_env_model(monkeypatch):
    """Test LLM_PROVIDER and LLM_MODEL select the provider and model."""
    monkeypatch.setenv("LLM_PROVIDER", "openai")
    monkeypatch.setenv("LLM_MODEL", "gpt-test")
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")

    provider = get_provider()

    assert isinstance(provider, OpenAIProvider)
    assert provider.name == "openai/gpt-test"


@pytest.mark.unit
@pytest.mark.parametrize("provider_name, key_var", [("openai", "OPENAI_API_KEY"), ("anthropic", "ANTHROPIC_API_KEY")])
def test_try_get_provider_without_key(monkeypatch, provider_name, key_var):
    """Test a missing API key means no provider rather than an error."""
    monkeypatch.delenv(key_var, raising=False)
    assert try_get_provider(provider_name) is None
