"""
Utility functions for the shape to code generator.
"""

import keyword
import re

# Regex pattern to split text into words, handling camelCase boundaries
_WORD_PATTERN = re.compile(r"[A-Z]+(?=[A-Z][a-z])|[A-Z]?[a-z]+|[A-Z]+|[0-9]+")


def _normalize_separators(text: str) -> str:
    """Normalize separators (underscores, hyphens, dots) to spaces."""
    return text.replace("_", " ").replace("-", " ").replace(".", " ")


def _split_into_words(text: str) -> list[str]:
    """Split text into words, handling camelCase boundaries."""
    return _WORD_PATTERN.findall(text)


def snake_to_pascal_case(text: str) -> str:
    """Convert snake_case, camelCase, or space-separated text to PascalCase.

    Examples:
        "first_name" -> "FirstName"
        "actionTemplate" -> "ActionTemplate"
        "first 3 rows" -> "First3Rows"

    Args:
        text: The text to convert

    Returns:
        PascalCase string
    """
    if not text:
        return ""
    words = _split_into_words(_normalize_separators(text))
    return "".join(word.capitalize() for word in words if word)


def to_snake_case(text: str) -> str:
    """Convert PascalCase, camelCase or kebab-case text to snake_case.

    Examples:
        "GetPerson" -> "get_person"
        "HTTPStatus" -> "http_status"
        "firstName" -> "first_name"
    """
    words = _split_into_words(_normalize_separators(text))
    return "_".join(word.lower() for word in words)


def to_enum_member_name(value: str) -> str:
    """Derive an UPPER_SNAKE_CASE enum member name from a wire value."""
    name = "_".join(word.upper() for word in _split_into_words(_normalize_separators(value)))
    if not name:
        name = "EMPTY"
    if name[0].isdigit():
        name = f"V_{name}"
    return name


def escape_identifier(name: str, reserved: frozenset[str] = frozenset()) -> str:
    """Append an underscore to names that collide with Python keywords or reserved names."""
    if keyword.iskeyword(name) or name in reserved:
        return f"{name}_"
    return name


def docstring_text(text: str | None) -> str:
    """Make documentation text safe to embed in a triple-quoted docstring."""
    if not text:
        return ""
    text = re.sub(r"<[^>]+>", "", str(text)).strip()
    return text.replace("\\", "\\\\").replace('"""', '\\"\\"\\"').rstrip('"')
