"""
Token spellings and fixed policy values shared across argot.
"""

SHORT_PREFIX = "-"
LONG_PREFIX = "--"
OPTION_TERMINATOR = "--"
EQUALS_SEPARATOR = "="

BOOLEAN_TRUE = "true"
BOOLEAN_FALSE = "false"

# Largest edit distance still offered as a "did you mean" suggestion.
MAX_SUGGESTION_DISTANCE = 2

SHORT_NAME_LENGTH = 1


__all__ = (
    "SHORT_PREFIX",
    "LONG_PREFIX",
    "OPTION_TERMINATOR",
    "EQUALS_SEPARATOR",
    "BOOLEAN_TRUE",
    "BOOLEAN_FALSE",
    "MAX_SUGGESTION_DISTANCE",
    "SHORT_NAME_LENGTH",
)
