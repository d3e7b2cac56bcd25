"""Input sanitization for request bodies and document identifiers.

String fields in request bodies are stripped of HTML with nh3 before they
reach a repository; ids are checked against the store's id format.
"""

import re
from typing import Any, ClassVar

import nh3


class InputSanitizer:
    """
    Sanitize user inputs to prevent stored XSS.

    Schemas call sanitize_input from a shared model validator; the store and
    the repositories check ids with is_identifier before any I/O.
    """

    ALLOWED_TAGS: ClassVar[set[str]] = set()
    IDENTIFIER_PATTERN: ClassVar[re.Pattern[str]] = re.compile(r"^[A-Za-z0-9_-]{1,64}$")

    @classmethod
    def sanitize_html(cls, value: str) -> str:
        """Remove all HTML tags (script/style content included) with nh3.

        Args:
            value: Raw string that may contain HTML.

        Returns:
            Sanitized string safe for HTML display.
        """
        if not value:
            return value
        return nh3.clean(value, tags=cls.ALLOWED_TAGS, attributes={})

    @classmethod
    def is_identifier(cls, value: Any) -> bool:
        """Return True if value is a string in document id format."""
        return isinstance(value, str) and bool(cls.IDENTIFIER_PATTERN.match(value))

    @classmethod
    def sanitize_dict(
        cls,
        data: dict[str, Any],
        max_depth: int = 100,
    ) -> dict[str, Any]:
        """Recursively sanitize string values in a dict.

        Raises:
            ValueError: If max_depth <= 0 or recursion exceeds max_depth.
        """
        if max_depth <= 0:
            raise ValueError("Maximum recursion depth exceeded or invalid max_depth")
        return {key: cls._sanitize_value(value, max_depth) for key, value in data.items()}

    @classmethod
    def sanitize_list(
        cls,
        data: list[Any],
        max_depth: int = 100,
    ) -> list[Any]:
        """Recursively sanitize string values in a list.

        Raises:
            ValueError: If max_depth <= 0 or recursion exceeds max_depth.
        """
        if max_depth <= 0:
            raise ValueError("Maximum recursion depth exceeded or invalid max_depth")
        return [cls._sanitize_value(item, max_depth) for item in data]

    @classmethod
    def _sanitize_value(cls, value: Any, max_depth: int) -> Any:
        if isinstance(value, str):
            return cls.sanitize_html(value)
        if isinstance(value, dict):
            return cls.sanitize_dict(value, max_depth=max_depth - 1)
        if isinstance(value, list):
            return cls.sanitize_list(value, max_depth=max_depth - 1)
        return value


def sanitize_input(
    value: Any,
    *,
    max_depth: int = 100,
) -> Any:
    """Sanitize any input value (string, dict, or list); other types pass through.

    Args:
        value: Value to sanitize.
        max_depth: Max recursion depth for dict/list (default 100).

    Returns:
        Sanitized value (new structure for dict/list).
    """
    if isinstance(value, str):
        return InputSanitizer.sanitize_html(value)
    if isinstance(value, dict):
        return InputSanitizer.sanitize_dict(value, max_depth=max_depth)
    if isinstance(value, list):
        return InputSanitizer.sanitize_list(value, max_depth=max_depth)
    return value

