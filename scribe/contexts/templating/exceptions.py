"""Custom exceptions for templating context with template references."""

from pathlib import Path
from typing import Optional


class TemplateNotFoundError(Exception):
    """
    Exception raised when a template id cannot be resolved to a skeleton file.

    Attributes:
        message: Error description
        template_id: Requested template identifier
        template_path: Path that was searched
    """

    def __init__(
        self,
        message: str,
        template_id: Optional[str] = None,
        template_path: Optional[Path] = None,
    ):
        self.message = message
        self.template_id = template_id
        self.template_path = template_path

        parts = [message]

        if template_id:
            parts.append(f"\nTemplate id: {template_id}")
        if template_path:
            parts.append(f"Searched: {template_path}")

        super().__init__("\n".join(parts))


class InvalidTemplateError(ValueError):
    """
    Exception raised when a template skeleton does not contain exactly one
    content placeholder, or its id contains characters outside [A-Za-z0-9_-].
    """

    def __init__(self, message: str, template_id: Optional[str] = None):
        self.message = message
        self.template_id = template_id
        super().__init__(f"{message} (template id: {template_id})" if template_id else message)


class TemplateStoreError(Exception):
    """
    Exception raised when even the default template cannot be loaded.

    This is the only rendering failure surfaced to callers.

    Attributes:
        message: Error description
        template_id: Default template id that failed
        original_error: The underlying load error
    """

    def __init__(
        self,
        message: str,
        template_id: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        self.message = message
        self.template_id = template_id
        self.original_error = original_error

        parts = [message]

        if template_id:
            parts.append(f"\nDefault template: {template_id}")
        if original_error:
            parts.append(f"\nOriginal error: {str(original_error)}")

        super().__init__("\n".join(parts))
