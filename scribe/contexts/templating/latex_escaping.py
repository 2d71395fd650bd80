"""
LaTeX escaping and key-value argument building.

Pure string functions used by the section renderer. Escaping is applied exactly
once, to raw user text, immediately before the text is embedded in markup.

Key-value arguments feed keycommand macros such as \\educationItem[...]. A key
whose value is empty is never emitted (keycommand treats "key=" as a malformed
boolean), and a command whose argument list is empty is dropped entirely.
"""

import re
from typing import Any, Iterable, Optional

# Reserved characters in table order; each maps to its LaTeX-safe form
LATEX_ESCAPES = {
    "\\": r"\textbackslash{}",
    "{": r"\{",
    "}": r"\}",
    "$": r"\$",
    "&": r"\&",
    "%": r"\%",
    "#": r"\#",
    "_": r"\_",
    "^": r"\textasciicircum{}",
    "~": r"\textasciitilde{}",
    "…": r"\ldots{}",
}

# One alternation over every key, so a replacement is never rescanned
_ESCAPE_PATTERN = re.compile("|".join(re.escape(char) for char in LATEX_ESCAPES))
_DASH_PATTERN = re.compile("[–—]")
_WHITESPACE_PATTERN = re.compile(r"\s+")
_SCHEME_PATTERN = re.compile(r"^https?://", re.IGNORECASE)

# Characters that cannot appear raw inside an \href target
_URL_ENCODINGS = {"\\": "%5C", "{": "%7B", "}": "%7D", " ": "%20"}


def single_line(value: Any) -> str:
    """Collapse all whitespace runs (including newlines) to single spaces and trim."""
    if value is None:
        return ""
    return _WHITESPACE_PATTERN.sub(" ", str(value)).strip()


def non_empty(value: Any) -> bool:
    """True when value is not None and does not trim to an empty string."""
    return value is not None and bool(str(value).strip())


def trim_join(parts: Iterable[Any], separator: str) -> str:
    """Trim each part, drop empty ones, and join the rest with separator."""
    return separator.join(str(part).strip() for part in parts if non_empty(part))


def strip_scheme(url: Optional[str]) -> str:
    """Remove a leading http:// or https:// for display (e.g., in contact lines)."""
    if not non_empty(url):
        return ""
    return _SCHEME_PATTERN.sub("", str(url).strip())


def escape_latex(value: Any) -> str:
    """
    Escape raw text for embedding in LaTeX.

    Steps:
    1. Collapse whitespace and trim
    2. Normalize en/em dashes to "--"
    3. Replace reserved characters (\\ { } $ & % # _ ^ ~ and the ellipsis) in a
       single pass

    Not re-entrant: escaping already-escaped text escapes its backslashes again.

    Args:
        value: Raw text (numbers are converted with str(); None becomes "")

    Returns:
        LaTeX-safe text

    Example:
        >>> escape_latex("R&D  50% — C#")
        'R\\\\&D 50\\\\% -- C\\\\#'
    """
    text = single_line(value)
    if not text:
        return ""
    text = _DASH_PATTERN.sub("--", text)
    return _ESCAPE_PATTERN.sub(lambda match: LATEX_ESCAPES[match.group(0)], text)


def escape_url(url: Any) -> str:
    """
    Prepare a URL for use as an \\href target.

    Characters that break the argument are percent-encoded, then % and # are
    escaped for hyperref.
    """
    text = single_line(url)
    for char, encoded in _URL_ENCODINGS.items():
        text = text.replace(char, encoded)
    return text.replace("%", r"\%").replace("#", r"\#")


def kv(key: str, value: Any) -> Optional[str]:
    """
    Build one key-value argument.

    Returns:
        "key={escaped value}", or None when value is None or trims to empty

    Example:
        >>> kv("email", "a_b@example.com")
        'email={a\\\\_b@example.com}'
        >>> kv("phone", "   ") is None
        True
    """
    if not non_empty(value):
        return None
    return f"{key}={{{escape_latex(value)}}}"


def kvs(items: Iterable[Optional[str]]) -> str:
    """
    Join key-value arguments, dropping None and empty entries.

    An empty result means the enclosing command must not be emitted.
    """
    return ", ".join(item for item in items if item)
