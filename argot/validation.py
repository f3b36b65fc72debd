"""
Definition validator: static consistency checks for command declarations.

validate(command) runs a fixed pipeline of independent assertions and raises
ConfigurationError on the first violation (fail-fast, first violation wins):

1. command name: non-empty, no whitespace, does not start with '-'
2. options: names follow the same rule; short aliases are exactly one
   character and never '-'
3. option names unique; short aliases unique (absent aliases ignored)
4. at most one variadic argument, and only as the last argument
5. argument names non-empty without whitespace; no required argument after an
   optional one
6. (when given) global help/version options are boolean and well named

Validation only reads the definition, so running it twice is harmless.
"""
import logging
import re

from .constants import SHORT_NAME_LENGTH, SHORT_PREFIX
from .definitions import CommandDefinition, DEFAULT_GLOBAL_OPTIONS, GlobalOptions, ValueType
from .faults import ConfigurationError
from .utils import Unset

logger = logging.getLogger(__name__)

_NAME_PATTERN = re.compile(r"\S+")


def _assert_name(name, field, /, *, prefixed=False):
    if not _NAME_PATTERN.fullmatch(name):
        raise ConfigurationError("invalid %s: %r" % (field, name), field=field, value=name)
    if prefixed and name.startswith(SHORT_PREFIX):
        raise ConfigurationError(
            "invalid %s: %r cannot start with %r" % (field, name, SHORT_PREFIX),
            field=field,
            value=name,
        )


def _assert_unique(values, field, /):
    seen = set()
    for value in values:
        if value in seen:
            raise ConfigurationError("duplicated %s: %r" % (field, value), field=field, value=value)
        seen.add(value)


def _assert_option(option, /):
    _assert_name(option.name, "option name", prefixed=True)

    if option.short is None:
        return
    if len(option.short) != SHORT_NAME_LENGTH or option.short == SHORT_PREFIX:
        raise ConfigurationError(
            "invalid option short name: %r (expected a single character other than %r)" % (
                option.short, SHORT_PREFIX
            ),
            field="option short name",
            value=option.short,
        )


def _assert_command_name(command, /):
    _assert_name(command.name, "command name", prefixed=True)


def _assert_options(command, /):
    for option in command.options:
        _assert_option(option)


def _assert_unique_options(command, /):
    _assert_unique([option.name for option in command.options], "option name")
    _assert_unique([option.short for option in command.options if option.short is not None], "option short name")


def _assert_variadic(command, /):
    variadics = [index for index, argument in enumerate(command.arguments) if argument.variadic]
    if len(variadics) > 1:
        raise ConfigurationError(
            "only one variadic argument is allowed, found %s" % ", ".join(
                repr(command.arguments[index].name) for index in variadics
            ),
            field="variadic argument",
        )
    if variadics and variadics[0] != len(command.arguments) - 1:
        raise ConfigurationError(
            "variadic argument %r must be the last argument" % command.arguments[variadics[0]].name,
            field="variadic argument",
            value=command.arguments[variadics[0]].name,
        )


def _assert_arguments(command, /):
    optional = Unset
    for argument in command.arguments:
        _assert_name(argument.name, "argument name")

        if not argument.required:
            optional = optional or argument
        elif optional:
            raise ConfigurationError(
                "required argument %r cannot follow optional argument %r" % (argument.name, optional.name),
                field="argument order",
                value=argument.name,
            )


_PIPELINE = (
    _assert_command_name,
    _assert_options,
    _assert_unique_options,
    _assert_variadic,
    _assert_arguments,
)


def validate(command, /, global_options=None):
    """
    check a command definition, raising ConfigurationError on the first problem.

    parameters
    - command: CommandDefinition
    - global_options: GlobalOptions | None
      the surrounding CLI layer's help/version pair, validated through the same
      routine when given.
    """
    if not isinstance(command, CommandDefinition):
        raise TypeError("validate() argument must be a command definition")

    for check in _PIPELINE:
        check(command)

    if global_options is not None:
        validate_global_options(global_options)

    logger.debug("command %r is valid (%d options, %d arguments)",
                 command.name, len(command.options), len(command.arguments))


def validate_global_options(options, /):
    """
    help and version must both be boolean options with valid names.
    """
    if not isinstance(options, GlobalOptions):
        raise TypeError("validate_global_options() argument must be global options")

    for field, option in options._asdict().items():
        if option.type is not ValueType.BOOLEAN:
            raise ConfigurationError(
                "the %s option must be boolean, not %s" % (field, option.type),
                field="%s option type" % field,
                value=option.type,
            )

    for option in options:
        _assert_option(option)


def resolve_global_options(*, help=Unset, version=Unset):
    """
    build the global option pair from the defaults and optional overrides.

    overrides are mappings of OptionDefinition fields, e.g. {"short": "?"};
    names and types stay fixed. The result is validated before it is returned.
    """
    options = DEFAULT_GLOBAL_OPTIONS.override(help=help, version=version)
    validate_global_options(options)
    return options


__all__ = (
    "validate",
    "validate_global_options",
    "resolve_global_options",
)
