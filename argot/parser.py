"""
Argot parser: turn a token vector into typed options and arguments.

What this module provides
- parse(tokens, command): a single left-to-right scan over the tokens that
  follow the command name, returning a ParseOutcome. Parsing is a pure function
  of (tokens, command): every call builds its own scan state and nothing
  survives between calls.
- is_option_token(token, command): the lookahead classifier deciding whether a
  would-be option value is in fact another known option.
- ParseSuccess / ParseFailure: the two shapes of ParseOutcome.

Token classification (while options are allowed)
- '--'                      terminator: every later token is positional.
- '--name' / '--name=value' long option.
- '-x' / '-x=value'         short option.
- '-xyz'                    bundle of boolean short options.
- anything else             positional.

Errors
- user-input problems never raise; they are collected as ParseError records in
  scan order, followed by missing required options, then argument binding errors.
- any collected error turns the outcome into a ParseFailure carrying all of them.
"""
import logging

from rich.console import Group

from .constants import EQUALS_SEPARATOR, LONG_PREFIX, OPTION_TERMINATOR, SHORT_PREFIX
from .definitions import CommandDefinition, ValueType, long_flag, short_flag
from .faults import ParseError, ParseErrorKind, header, styles
from .suggestions import suggest
from .utils import Unset, view

logger = logging.getLogger(__name__)


class ParseOutcome:
    """
    common base of ParseSuccess and ParseFailure; 'ok' discriminates them.

    outcomes are truthy exactly when ok, and compare by value. The base itself
    is undetermined (ok is None) and falsy.
    """
    __slots__ = ()

    ok = None

    def __bool__(self):
        return bool(self.ok)


class ParseSuccess(ParseOutcome):
    """
    successful parse.

    attributes
    - args: read-only mapping argument name → value (list for variadic
      arguments, None for an omitted optional argument without default).
    - options: read-only mapping option name → value (booleans default to False,
      options without value nor default are absent).
    """
    __slots__ = ("_args", "_options")

    ok = True

    args = view("args")
    options = view("options")

    def __init__(self, args, options):
        self._args = args
        self._options = options

    def __eq__(self, other):
        if not isinstance(other, ParseSuccess):
            return NotImplemented
        return (self._args, self._options) == (other._args, other._options)

    __hash__ = None

    def __repr__(self):
        return "parse-success(args=%r, options=%r)" % (self._args, self._options)


class ParseFailure(ParseOutcome):
    """
    failed parse: every ParseError found in one pass, in detection order.
    """
    __slots__ = ("_errors",)

    ok = False

    errors = view("errors")

    def __init__(self, errors):
        self._errors = tuple(errors)

    def __eq__(self, other):
        if not isinstance(other, ParseFailure):
            return NotImplemented
        return self._errors == other._errors

    __hash__ = None

    def __repr__(self):
        return "parse-failure(errors=%r)" % (self._errors,)

    def kinds(self):
        """the error kinds in detection order (convenient for dispatching)."""
        return [error.kind for error in self._errors]

    def __rich__(self):
        style = styles({
            "title": "bold #FF4DA6",  # friendly pinky group title
        })
        count = len(self._errors)
        title = header(("%d parse %s" % (count, "error" if count == 1 else "errors"), style["title"]))
        return Group(title, *self._errors)


def _split(token):
    """'--name=value' -> ('--name', 'value'); no '=' -> (token, None)"""
    head, separator, value = token.partition(EQUALS_SEPARATOR)
    return head, (value if separator else None)


def _recognizes(token, longs, shorts):
    if not token.startswith(SHORT_PREFIX):
        return False
    if token.startswith(LONG_PREFIX):
        head, _ = _split(token)
        return head[len(LONG_PREFIX):] in longs
    return token[len(SHORT_PREFIX):len(SHORT_PREFIX) + 1] in shorts


def is_option_token(token, command, /):
    """
    tell whether token spells a known option of command.

    a token is recognized when it starts with '-' and either
    - starts with '--' and its name (before any '=') is a declared long name, or
    - its first character after '-' is a declared short alias.

    the parser consults this before consuming the next token as an option value,
    so '--output --force' reports a missing value instead of swallowing '--force'.
    """
    return _recognizes(
        token,
        {option.name for option in command.options},
        {option.short for option in command.options if option.short is not None},
    )


def _matches(value, choices):
    # booleans are ints in Python; keep True from matching 1
    return any(choice == value and isinstance(choice, bool) == isinstance(value, bool) for choice in choices)


def _describe(choices):
    return ", ".join(map(repr, choices))


class _Scan:
    """
    per-call scan state: cursor, option switch, collected values and errors.
    """

    def __init__(self, tokens, command):
        self._tokens = tokens
        self._command = command
        self._longs = {option.name: option for option in command.options}
        self._shorts = {option.short: option for option in command.options if option.short is not None}

        self._index = 0
        self._allow_options = True
        self._present = set()
        self._positionals = []
        self._errors = []

        self._values = {}
        for option in command.options:
            if option.has_default:
                self._values[option.name] = option.default
            elif option.type is ValueType.BOOLEAN:
                self._values[option.name] = False

    def _fail(self, kind, message, /, **details):
        logger.debug("%s at token %d: %s", kind, self._index, message)
        self._errors.append(ParseError(kind, message, **details))

    def _unknown(self, spelling, candidates):
        if (suggestion := suggest(spelling, candidates)) is None:
            return self._fail(ParseErrorKind.UNKNOWN_OPTION, "unknown option %r" % spelling, token=spelling)
        self._fail(
            ParseErrorKind.UNKNOWN_OPTION,
            "unknown option %r, did you mean %r?" % (spelling, suggestion),
            token=spelling,
            suggestion=suggestion,
        )

    def _coerce(self, definition, raw, kind, subject):
        """
        coerce raw for definition; on failure record an error of kind and return Unset.
        """
        try:
            value = definition.type.coerce(raw)
        except ValueError:
            self._fail(
                kind,
                "invalid value %r for %s (expected %s)" % (raw, subject, definition.type),
                token=raw,
                expected=str(definition.type),
            )
            return Unset

        if definition.choices is not None and not _matches(value, definition.choices):
            self._fail(
                kind,
                "invalid value %r for %s (choices: %s)" % (raw, subject, _describe(definition.choices)),
                token=raw,
                choices=definition.choices,
            )
            return Unset

        return value

    def _register(self, option, raw, label):
        value = self._coerce(option, raw, ParseErrorKind.INVALID_OPTION_VALUE, "option %r" % label)
        if value is Unset:
            return
        self._values[option.name] = value
        self._present.add(option.name)

    def _flag(self, option):
        self._values[option.name] = True
        self._present.add(option.name)

    def _consume(self, option, label):
        """
        take the next token as the value of option unless it is absent, the
        terminator, or a known option token. Advances past what was used.
        """
        following = self._index + 1
        if (
                following >= len(self._tokens) or
                (candidate := self._tokens[following]) == OPTION_TERMINATOR or
                _recognizes(candidate, self._longs, self._shorts)
        ):
            self._fail(ParseErrorKind.MISSING_OPTION_VALUE, "missing value for option %r" % label, option=label)
            self._index += 1
            return
        self._register(option, candidate, label)
        self._index += 2

    def _scan_long(self, token):
        label, value = _split(token)
        if (option := self._longs.get(label[len(LONG_PREFIX):])) is None:
            self._unknown(label, [definition.long_flag for definition in self._command.options])
            self._index += 1
            return

        if option.type is ValueType.BOOLEAN and value is None:
            self._flag(option)
        elif value is None:
            return self._consume(option, label)
        else:
            self._register(option, value, label)
        self._index += 1

    def _scan_short(self, token):
        head, value = _split(token)
        body = head[len(SHORT_PREFIX):]

        if len(body) > 1:
            self._scan_bundle(token, body, value)
            self._index += 1
            return

        if (option := self._shorts.get(body)) is None:
            self._unknown(short_flag(body), [flag for definition in self._command.options for flag in definition.flags])
            self._index += 1
            return

        label = short_flag(option.short)
        if option.type is ValueType.BOOLEAN:
            # an attached '=value' is ignored for short flags
            self._flag(option)
        elif value is None:
            return self._consume(option, label)
        else:
            self._register(option, value, label)
        self._index += 1

    def _scan_bundle(self, token, body, value):
        if value is not None:
            return self._fail(
                ParseErrorKind.INVALID_OPTION_BUNDLE,
                "invalid option bundle %r: bundled flags cannot take a value" % token,
                token=token,
            )

        for alias in body:
            if (option := self._shorts.get(alias)) is None:
                return self._unknown(
                    short_flag(alias),
                    [flag for definition in self._command.options for flag in definition.flags],
                )
            if option.type is not ValueType.BOOLEAN:
                return self._fail(
                    ParseErrorKind.INVALID_OPTION_BUNDLE,
                    "invalid option bundle %r: %r takes a value and cannot be bundled" % (
                        token, short_flag(alias)
                    ),
                    token=token,
                    option=short_flag(alias),
                )
            self._flag(option)

    def _scan(self):
        while self._index < len(self._tokens):
            token = self._tokens[self._index]

            if not self._allow_options:
                self._positionals.append(token)
                self._index += 1
            elif token == OPTION_TERMINATOR:
                logger.debug("terminator at token %d, remaining tokens are positional", self._index)
                self._allow_options = False
                self._index += 1
            elif token.startswith(LONG_PREFIX) and len(token) > len(LONG_PREFIX):
                self._scan_long(token)
            elif token.startswith(SHORT_PREFIX) and len(token) > len(SHORT_PREFIX):
                self._scan_short(token)
            else:
                self._positionals.append(token)
                self._index += 1

    def _check_required(self):
        for option in self._command.options:
            if option.required and option.name not in self._present:
                self._fail(
                    ParseErrorKind.MISSING_REQUIRED_OPTION,
                    "missing required option %r" % long_flag(option.name),
                    option=long_flag(option.name),
                )

    def _bind(self):
        """
        match positional tokens against declared arguments, in order.
        """
        arguments = self._command.arguments
        positionals = self._positionals
        args = {}

        if not any(argument.variadic for argument in arguments) and len(positionals) > len(arguments):
            extras = positionals[len(arguments):]
            self._fail(
                ParseErrorKind.TOO_MANY_ARGUMENTS,
                "too many arguments: %s" % _describe(extras),
                tokens=tuple(extras),
            )

        for index, argument in enumerate(arguments):
            subject = "argument %r" % argument.name

            if argument.variadic:
                rest = positionals[index:]
                if not rest and argument.required:
                    self._fail(
                        ParseErrorKind.MISSING_REQUIRED_ARGUMENT,
                        "missing required argument %r" % argument.name,
                        argument=argument.name,
                    )
                elif not rest and argument.has_default:
                    args[argument.name] = argument.default
                    break
                values = [
                    self._coerce(argument, raw, ParseErrorKind.INVALID_ARGUMENT_VALUE, subject) for raw in rest
                ]
                args[argument.name] = [value for value in values if value is not Unset]
                break

            if index >= len(positionals):
                if argument.required:
                    self._fail(
                        ParseErrorKind.MISSING_REQUIRED_ARGUMENT,
                        "missing required argument %r" % argument.name,
                        argument=argument.name,
                    )
                elif argument.has_default:
                    args[argument.name] = argument.default
                else:
                    args[argument.name] = None
                continue

            value = self._coerce(argument, positionals[index], ParseErrorKind.INVALID_ARGUMENT_VALUE, subject)
            if value is not Unset:
                args[argument.name] = value

        return args

    def run(self):
        self._scan()
        self._check_required()
        args = self._bind()

        if self._errors:
            return ParseFailure(self._errors)
        return ParseSuccess(args, self._values)


def parse(tokens, command, /):
    """
    parse the tokens following a command name against its definition.

    parameters
    - tokens: iterable of str, already split (no shell quoting is interpreted);
      the program name and the command name itself must not be included.
    - command: CommandDefinition, validated beforehand with argot.validate().

    returns
    - ParseSuccess(args, options) when no error was found.
    - ParseFailure(errors) with every error of the pass otherwise.

    raises
    - TypeError when command is not a CommandDefinition or a token is not a
      string (programming errors, not user input).
    """
    if not isinstance(command, CommandDefinition):
        raise TypeError("parse() second argument must be a command definition")
    tokens = list(tokens)
    if not all(isinstance(token, str) for token in tokens):
        raise TypeError("parse() tokens must be strings")

    logger.debug("parsing %d tokens for command %r", len(tokens), command.name)
    return _Scan(tokens, command).run()


__all__ = (
    "ParseOutcome",
    "ParseSuccess",
    "ParseFailure",
    "parse",
    "is_option_token",
)
