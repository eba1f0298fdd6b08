"""
Input validation helpers for SQL generation.

Identifiers cannot be bound as parameters, so anything that ends up in the
statement text as a table or column name must pass ``validate_identifier``.
"""

import re

from ..exceptions import SQLInjectionAttempt

# PostgreSQL truncates identifiers longer than NAMEDATALEN - 1
MAX_IDENTIFIER_LENGTH = 63

_IDENTIFIER_PART = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def validate_identifier(identifier: str) -> str:
    """
    Validate a table or column name before it is placed in SQL text.

    Accepts ``name`` or ``schema.name``. Each part must start with a letter or
    underscore and contain only letters, digits and underscores.

    Args:
        identifier: Table or column name

    Returns:
        The identifier, unchanged

    Raises:
        SQLInjectionAttempt: If the identifier is not a plain SQL name
    """
    if not isinstance(identifier, str) or not identifier:
        raise SQLInjectionAttempt(str(identifier), "identifier must be a non-empty string")

    parts = identifier.split(".")
    if len(parts) > 2:
        raise SQLInjectionAttempt(identifier, "too many dotted parts")

    for part in parts:
        if len(part) > MAX_IDENTIFIER_LENGTH:
            raise SQLInjectionAttempt(
                identifier, f"part exceeds {MAX_IDENTIFIER_LENGTH} characters"
            )
        if not _IDENTIFIER_PART.match(part):
            raise SQLInjectionAttempt(identifier)

    return identifier


def escape_like(value: str, escape_char: str = "\\") -> str:
    """
    Escape LIKE/ILIKE wildcards so ``value`` matches literally.

    Args:
        value: Raw search text
        escape_char: Escape character (PostgreSQL default is backslash)

    Returns:
        Text with the escape character, ``%`` and ``_`` escaped
    """
    return (
        value.replace(escape_char, escape_char * 2)
        .replace("%", f"{escape_char}%")
        .replace("_", f"{escape_char}_")
    )
