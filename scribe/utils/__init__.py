"""
Shared utilities for SCRIBE.

Common functionality used across contexts:
- Logger setup
- LLM provider abstraction and lenient JSON parsing with repair
- Text helpers
"""

from scribe.utils.llm import JSONParseResult, get_provider, parse_json_response, try_get_provider

__all__ = ["JSONParseResult", "get_provider", "parse_json_response", "try_get_provider"]
