"""
Argot faults (parse errors and configuration errors) and rendering.

Scope
- ParseErrorKind: the closed, stable set of user-input error kinds the parser
  reports. Orchestration layers switch on these; messages are for display only.
- ParseError: one user-input problem (kind + message + read-only details).
  Parse errors are data: the parser collects and returns them, it never raises them.
- ConfigurationError: a defect in a command declaration. Raised fail-fast by the
  definition validator and by definition construction.

UX goals
- Soft but technical language: short lowercase messages naming the offending token.
- A single clear suggestion when one is available (“did you mean '--help'?”).

Rendering
- Every fault implements the rich renderable protocol (__rich__), so callers may
  print it with a rich Console. The host application can override styles through a
  __styles__ mapping in __main__, remap kind labels through __codes__, and name the
  program in headers through __prog__.
"""
from collections import defaultdict
from enum import StrEnum

from rich.console import Group
from rich.text import Text

from .utils import Unset, view


class ParseErrorKind(StrEnum):
    """
    canonical parse error kinds (stable identifiers).

    grouping
    - options: UNKNOWN_OPTION, MISSING_OPTION_VALUE, INVALID_OPTION_VALUE,
      MISSING_REQUIRED_OPTION, INVALID_OPTION_BUNDLE
    - arguments: MISSING_REQUIRED_ARGUMENT, TOO_MANY_ARGUMENTS, INVALID_ARGUMENT_VALUE

    the set is closed; adding a kind is a contract change for every caller.
    """
    UNKNOWN_OPTION            = "UnknownOption"
    MISSING_OPTION_VALUE      = "MissingOptionValue"
    INVALID_OPTION_VALUE      = "InvalidOptionValue"
    MISSING_REQUIRED_OPTION   = "MissingRequiredOption"
    MISSING_REQUIRED_ARGUMENT = "MissingRequiredArgument"
    TOO_MANY_ARGUMENTS        = "TooManyArguments"
    INVALID_ARGUMENT_VALUE    = "InvalidArgumentValue"
    INVALID_OPTION_BUNDLE     = "InvalidOptionBundle"

    def normalize(self):
        """
        return a host-normalized label for this kind.

        the host application can provide a __codes__ mapping in __main__ to
        override labels; otherwise the kind value itself is returned.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))

    @property
    def label(self):
        """human title derived from the kind, e.g. 'unknown option'."""
        return self.name.replace("_", " ").lower()


def styles(defaults, /):
    """
    merge default styles with the host overrides found in __main__.__styles__.
    """
    return defaultdict(str, defaults | getattr(__import__("__main__"), "__styles__", {}))


def header(*fragments):
    """
    assemble a '[ prog — fragment | fragment ]' header line.

    the program name comes from __main__.__prog__ and is omitted when absent.
    fragments are (text, style) pairs.
    """
    body = Text(" | ").join(Text(str(text), style) for text, style in fragments)
    if (prog := getattr(__import__("__main__"), "__prog__", None)) is None:
        return Text.assemble("[ ", body, " ]")
    return Text.assemble("[ ", Text(str(prog), "bold"), " — ", body, " ]")


class ParseError:
    """
    one user-input problem found while parsing.

    attributes
    - kind: ParseErrorKind
    - message: str, human-readable, not meant to be machine-parsed
    - details: read-only mapping with context for the caller (token, suggestion,
      choices, ...); never required to understand the error.

    parse errors compare by value so that two parses of the same input produce
    equal outcomes.
    """
    __slots__ = ("_kind", "_message", "_details")

    kind = view("kind")
    message = view("message")
    details = view("details")

    def __init__(self, kind, message, /, **details):
        if not isinstance(message, str):
            raise TypeError("parse error message must be a string")
        self._kind = ParseErrorKind(kind)
        self._message = message
        self._details = details

    def __eq__(self, other):
        if not isinstance(other, ParseError):
            return NotImplemented
        return (self._kind, self._message, self._details) == (other._kind, other._message, other._details)

    def __hash__(self):
        return hash((self._kind, self._message))

    def __repr__(self):
        return "parse-error(kind=%r, message=%r)" % (self._kind.value, self._message)

    def __str__(self):
        return self._message

    def __rich__(self):
        style = styles({
            "kind": "bold #00E5FF",  # neon cyan kind label
            "error-title": "bold #FF4DA6",  # friendly pinky title
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        })

        title = header(
            (self._kind.normalize(), style["kind"]),
            (self._kind.label.title(), style["error-title"]),
        )
        message = Text(self._message, style["error-message"])

        if (suggestion := self._details.get("suggestion")) is None:
            return Group(title, message)
        hint = Text.assemble((" → ", style["hint-arrow"]), ("did you mean %r?" % suggestion, style["hint"]))
        return Group(title, message, hint)


class ConfigurationError(ValueError):
    """
    a command declaration is internally inconsistent.

    raised (never returned) because a broken definition is a programming error
    discovered at registration time, not a runtime condition to recover from.

    attributes
    - field: which part of the definition is at fault, e.g. 'option name',
      'option short name', 'argument order'.
    - value: the offending value (Unset when the violation has no single value).
    """

    def __init__(self, message, /, *, field, value=Unset):
        super().__init__(message)
        self.message = message
        self.field = field
        self.value = value

    def __rich__(self):
        style = styles({
            "field": "bold #FFB400",  # amber field label
            "error-title": "bold #FF4DA6",  # friendly pinky title
            "error-message": "#C8C8D0",  # soft light gray message
        })
        title = header(
            (self.field, style["field"]),
            ("Invalid Definition", style["error-title"]),
        )
        return Group(title, Text(self.message, style["error-message"]))

    def __repr__(self):
        return "%s(%r, field=%r)" % (type(self).__name__, self.message, self.field)


__all__ = (
    "ParseErrorKind",
    "ParseError",
    "ConfigurationError",
)
