"""Unit tests for LaTeX escaping and key-value argument building."""

import re

import pytest

from scribe.contexts.templating.latex_escaping import (
    escape_latex,
    escape_url,
    kv,
    kvs,
    single_line,
    strip_scheme,
    trim_join,
)

RESERVED = "\\{}$&%#_^~"


def _unescaped_reserved(text: str) -> list:
    """Reserved characters in escaped output that are not part of an escape sequence."""
    # Remove every sequence escape_latex can produce, then look for leftovers
    stripped = re.sub(
        r"\\textbackslash\{\}|\\textasciicircum\{\}|\\textasciitilde\{\}|\\ldots\{\}|\\[{}$&%#_]",
        "",
        text,
    )
    return [char for char in stripped if char in RESERVED]


@pytest.mark.unit
@pytest.mark.parametrize(
    "raw, expected",
    [
        ("R&D", r"R\&D"),
        ("50%", r"50\%"),
        ("C#", r"C\#"),
        ("snake_case", r"snake\_case"),
        ("$100", r"\$100"),
        ("{braces}", r"\{braces\}"),
        ("a^b", r"a\textasciicircum{}b"),
        ("~home", r"\textasciitilde{}home"),
        ("C:\\temp", r"C:\textbackslash{}temp"),
    ],
)
def test_escape_reserved_characters(raw, expected):
    """Test each reserved character maps to its LaTeX-safe form."""
    assert escape_latex(raw) == expected


@pytest.mark.unit
def test_escape_backslash_not_double_escaped():
    """Test the braces produced for a backslash are not escaped again."""
    assert escape_latex("\\") == r"\textbackslash{}"


@pytest.mark.unit
def test_escape_dashes_and_ellipsis():
    """Test en/em dashes become -- and the ellipsis becomes \\ldots{}."""
    assert escape_latex("2019–2021") == "2019--2021"
    assert escape_latex("fast — reliable") == "fast -- reliable"
    assert escape_latex("and more…") == r"and more\ldots{}"


@pytest.mark.unit
def test_escape_collapses_whitespace():
    """Test whitespace runs and newlines collapse before escaping."""
    assert escape_latex("  Built\n   APIs\t fast  ") == "Built APIs fast"


@pytest.mark.unit
def test_escape_empty_values():
    """Test None and blank strings escape to an empty string."""
    assert escape_latex(None) == ""
    assert escape_latex("   ") == ""


@pytest.mark.unit
def test_escape_leaves_no_unescaped_reserved_characters():
    """Test output of a string containing every reserved character is fully escaped."""
    raw = r"path\to {x} costs $5 & 10% #1 my_var x^2 ~user"
    escaped = escape_latex(raw)

    assert _unescaped_reserved(escaped) == []
    # Visible words survive
    for word in ("path", "costs", "user", "var"):
        assert word in escaped


@pytest.mark.unit
def test_escape_is_idempotent_without_reserved_characters():
    """Test text with no reserved characters is unchanged by a second pass."""
    once = escape_latex("Senior Engineer, London")
    assert escape_latex(once) == once


@pytest.mark.unit
def test_kv_omits_empty_values():
    """Test kv returns None for missing or blank values."""
    assert kv("email", None) is None
    assert kv("email", "") is None
    assert kv("email", "   ") is None


@pytest.mark.unit
def test_kv_escapes_value():
    """Test kv wraps the escaped value in braces."""
    assert kv("email", "a_b@example.com") == r"email={a\_b@example.com}"


@pytest.mark.unit
def test_kvs_drops_empty_arguments():
    """Test kvs joins only the present arguments."""
    args = kvs([kv("company", "Acme"), kv("location", ""), kv("position", "Engineer")])
    assert args == "company={Acme}, position={Engineer}"


@pytest.mark.unit
def test_kvs_all_empty_is_empty_string():
    """Test an argument list with no values produces an empty string."""
    assert kvs([kv("company", None), kv("location", "  ")]) == ""


@pytest.mark.unit
def test_helpers():
    """Test the small string helpers used by the renderer."""
    assert single_line("a\n\nb") == "a b"
    assert trim_join([" Ada ", None, "", "Lovelace"], " ") == "Ada Lovelace"
    assert strip_scheme("https://github.com/ada") == "github.com/ada"
    assert strip_scheme(None) == ""


@pytest.mark.unit
def test_escape_url():
    """Test URL targets get % and # escaped and spaces encoded."""
    assert escape_url("https://example.com/a b#top") == r"https://example.com/a\%20b\#top"
