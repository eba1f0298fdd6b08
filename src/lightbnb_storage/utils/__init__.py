"""
lightbnb-storage utility modules.

Identifier validation, LIKE escaping and currency conversion.
"""

from .money import CENTS_PER_DOLLAR, cents_to_dollars, dollars_to_cents
from .validation import MAX_IDENTIFIER_LENGTH, escape_like, validate_identifier

__all__ = [
    # Validation utilities
    "validate_identifier",
    "escape_like",
    "MAX_IDENTIFIER_LENGTH",
    # Money utilities
    "dollars_to_cents",
    "cents_to_dollars",
    "CENTS_PER_DOLLAR",
]
