r"""
Argot command definitions.

Overview
- ValueType: closed set of value types (string, number, boolean), each paired
  with exactly one coercion function. Adding a type means adding a member and
  its coercer; nothing else inspects runtime types.
- OptionDefinition[_T]: named option (e.g. --output / -o).
- ArgumentDefinition[_T]: positional argument, optionally variadic.
- CommandDefinition: a command's name, description, options, arguments and an
  opaque action.
- GlobalOptions: the (help, version) pair owned by the surrounding CLI layer.

Construction vs validation
- Constructors only sanitize Python-level shapes: wrong Python types raise
  TypeError, an unknown value type raises ConfigurationError.
- Naming, uniqueness and ordering rules belong to argot.validation.validate(),
  which runs once at registration time.

Immutability
- DefinitionType exposes every field listed in __introspectable__ as a
  read-only property (containers are returned as tuples) and seals instances
  with __slots__, so definitions can be shared freely across parses.

Quick example:
    >>> output = OptionDefinition("output", short="o", required=True)
    >>> entry = ArgumentDefinition("entry", required=True)
    >>> build = CommandDefinition("build", options=[output], arguments=[entry])
"""
import builtins
import copy
import decimal
import functools
import math
import operator
import re
from collections.abc import Iterable, Mapping
from enum import StrEnum
from typing import Generic, NamedTuple, TypeVar

from .constants import BOOLEAN_FALSE, BOOLEAN_TRUE, LONG_PREFIX, SHORT_PREFIX
from .faults import ConfigurationError
from .utils import Unset, coalesce, rename, view

_T = TypeVar("_T")


class ValueType(StrEnum):
    """
    value type of an option or argument.

    members compare equal to their string spelling, so definitions may use
    either ValueType.NUMBER or "number".
    """
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"

    def coerce(self, raw, /):
        """
        convert a raw token into a typed value; ValueError when it does not fit.
        """
        return _COERCERS[self](raw)


# ASCII only: int() and float() also take underscores and non-ASCII digits
_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")
_DECIMAL_PATTERN = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


def _coerce_string(raw):
    return raw


def _coerce_number(raw):
    if _INTEGER_PATTERN.fullmatch(raw):
        # Decimal has no digit limit, unlike int(str)
        return int(decimal.Decimal(raw))
    if not _DECIMAL_PATTERN.fullmatch(raw):
        raise ValueError("%r is not a numeric literal" % raw)
    value = float(raw)
    if not math.isfinite(value):
        raise ValueError("%r is not a finite number" % raw)
    return value


def _coerce_boolean(raw):
    if raw == BOOLEAN_TRUE:
        return True
    if raw == BOOLEAN_FALSE:
        return False
    raise ValueError("%r is neither %r nor %r" % (raw, BOOLEAN_TRUE, BOOLEAN_FALSE))


_COERCERS = {
    ValueType.STRING: _coerce_string,
    ValueType.NUMBER: _coerce_number,
    ValueType.BOOLEAN: _coerce_boolean,
}

assert _COERCERS.keys() == set(ValueType), "every value type needs a coercer"


def long_flag(name, /):
    """'output' -> '--output'"""
    return LONG_PREFIX + name


def short_flag(short, /):
    """'o' -> '-o'"""
    return SHORT_PREFIX + short


class DefinitionType(type):
    """
    Metaclass that turns definition classes into sealed, introspectable records.

    Responsibilities
    - derive __typename__ from the class name ('OptionDefinition' becomes
      'option-definition') for messages and representations.
    - expose every name in __introspectable__ as a read-only property backed
      by '_' + name (unless the class body defines its own accessor), and
      declare those backing names as __slots__.
    - provide stable __repr__/__rich_repr__ implementations.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        fields = namespace.get("__introspectable__", ())

        self = super().__new__(
            cls,
            name,
            bases,
            {
                field: view(field) for field in fields
            } | namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
                "__slots__": tuple("_" + field for field in fields),
            },
        )

        @rename("__repr__")
        def __repr__(self):
            """
            Return a concise, stable representation with key metadata.

            Example
            - option-definition(name='output', short='o', type='string', ...)
            """
            return "%s(%s)" % (
                type(self).__typename__,
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__())),
            )
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            """
            Yield (name, value) pairs for pretty printers (e.g., rich).
            """
            for field in type(self).__introspectable__:
                yield field, getattr(self, field)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: normalize and validate the fields shared by options and arguments.

    - name: must be a string (naming rules are checked by the validator).
    - type: ValueType or its string spelling; anything else is a ConfigurationError.
    - required: coerced to bool.
    - description: must be a string; surrounding whitespace is trimmed.
    - choices: Unset becomes None; otherwise a non-string iterable normalized to a
      tuple, kept as given (repeated values are harmless).

    The metadata dict is modified in place.
    """
    if not isinstance(metadata["name"], str):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")

    try:
        metadata["type"] = ValueType(metadata["type"])
    except ValueError:
        raise ConfigurationError(
            "unknown value type %r for %r (expected one of %s)" % (
                metadata["type"], metadata["name"], ", ".join(map(repr, ValueType))
            ),
            field="%s type" % cls.__typename__.split("-")[0],
            value=metadata["type"],
        ) from None

    metadata["required"] = bool(metadata["required"])

    if not isinstance(description := metadata["description"], str):
        raise TypeError(f"{cls.__typename__} 'description' must be a string")
    metadata["description"] = description.strip()

    if (choices := metadata["choices"]) is Unset:
        metadata["choices"] = None
        return
    if isinstance(choices, str) or not isinstance(choices, Iterable):
        raise TypeError(f"{cls.__typename__} 'choices' must be a non-string iterable")
    metadata["choices"] = tuple(choices)


class OptionDefinition(Generic[_T], metaclass=DefinitionType):
    """
    Named option declaration.

    Fields
    - name: long name without prefix ('output' for --output).
    - short: optional one-character alias without prefix ('o' for -o), or None.
    - type: ValueType, default string. Boolean options are flags: presence sets True.
    - required: the option must be supplied.
    - default: value used when the option is not supplied (Unset when not declared;
      None is a legitimate declared default).
    - choices: tuple of accepted (coerced) values, or None.
    - description: short human description.
    """

    __introspectable__ = (
        "name",
        "short",
        "type",
        "required",
        "default",
        "choices",
        "description",
    )

    def __init__(
            self,
            name,
            /,
            *,
            short=Unset,
            type=ValueType.STRING,
            required=False,
            default=Unset,
            choices=Unset,
            description="",
    ):
        metadata = {
            "name": name,
            "short": short,
            "type": type,
            "required": required,
            "default": default,
            "choices": choices,
            "description": description,
        }
        _sanitize_metadata(builtins.type(self), metadata)

        if not isinstance(short := coalesce(metadata["short"]), str | None):
            raise TypeError(f"{builtins.type(self).__typename__} 'short' must be a string")
        metadata["short"] = short

        for field, value in metadata.items():
            setattr(self, "_" + field, value)

    @property
    def default(self):
        """the declared default (a deep copy), or Unset when none was declared."""
        return copy.deepcopy(self._default)

    @property
    def has_default(self):
        return self._default is not Unset

    @property
    def long_flag(self):
        return long_flag(self._name)

    @property
    def short_flag(self):
        return short_flag(self._short) if self._short else None

    @property
    def flags(self):
        """every spelling of this option, short form first: ('-o', '--output')."""
        if self._short:
            return short_flag(self._short), long_flag(self._name)
        return long_flag(self._name),


class ArgumentDefinition(Generic[_T], metaclass=DefinitionType):
    """
    Positional argument declaration.

    Same fields as OptionDefinition except 'short', plus 'variadic': a variadic
    argument takes every remaining positional token as a list. Only the last
    argument may be variadic (enforced by the validator).
    """

    __introspectable__ = (
        "name",
        "type",
        "required",
        "default",
        "choices",
        "variadic",
        "description",
    )

    def __init__(
            self,
            name,
            /,
            *,
            type=ValueType.STRING,
            required=False,
            default=Unset,
            choices=Unset,
            variadic=False,
            description="",
    ):
        metadata = {
            "name": name,
            "type": type,
            "required": required,
            "default": default,
            "choices": choices,
            "variadic": bool(variadic),
            "description": description,
        }
        _sanitize_metadata(builtins.type(self), metadata)

        for field, value in metadata.items():
            setattr(self, "_" + field, value)

    @property
    def default(self):
        """the declared default (a deep copy), or Unset when none was declared."""
        return copy.deepcopy(self._default)

    @property
    def has_default(self):
        return self._default is not Unset


class CommandDefinition(metaclass=DefinitionType):
    """
    A command: name, description, ordered options and arguments, and an action.

    The action is opaque to argot (any callable, or None); it is only stored so
    the surrounding CLI layer can keep one record per command.
    """

    __introspectable__ = (
        "name",
        "description",
        "options",
        "arguments",
        "action",
    )

    def __init__(self, name, /, description="", *, options=(), arguments=(), action=None):
        cls = type(self)
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} 'name' must be a string")
        if not isinstance(description, str):
            raise TypeError(f"{cls.__typename__} 'description' must be a string")
        options = tuple(options)
        arguments = tuple(arguments)
        if not all(isinstance(option, OptionDefinition) for option in options):
            raise TypeError(f"{cls.__typename__} 'options' must contain option definitions")
        if not all(isinstance(argument, ArgumentDefinition) for argument in arguments):
            raise TypeError(f"{cls.__typename__} 'arguments' must contain argument definitions")
        if action is not None and not callable(action):
            raise TypeError(f"{cls.__typename__} 'action' must be callable")

        self._name = name
        self._description = description.strip()
        self._options = options
        self._arguments = arguments
        self._action = action


class GlobalOptions(NamedTuple):
    """
    the help/version options owned by the surrounding CLI layer.

    argot only validates them (both must be boolean and well named); acting on
    them is the caller's business.
    """
    help: OptionDefinition
    version: OptionDefinition

    def override(self, *, help=Unset, version=Unset):
        """
        return a copy with the given field overrides applied.

        overrides are mappings of OptionDefinition keyword fields (short,
        description, ...). 'name' and 'type' are fixed and never overridden.
        """
        return GlobalOptions(
            _override(self.help, coalesce(help, {})),
            _override(self.version, coalesce(version, {})),
        )


def _override(option, overrides):
    if not isinstance(overrides, Mapping):
        raise TypeError("global option overrides must be a mapping")
    fields = {
        field: getattr(option, field)
        for field in OptionDefinition.__introspectable__
        if field not in ("name", "type")
    }
    fields.update((key, value) for key, value in overrides.items() if key not in ("name", "type"))
    if fields["choices"] is None:
        fields["choices"] = Unset
    return OptionDefinition(option.name, type=option.type, **fields)


DEFAULT_GLOBAL_OPTIONS = GlobalOptions(
    help=OptionDefinition("help", short="h", type=ValueType.BOOLEAN, description="Show help"),
    version=OptionDefinition("version", short="v", type=ValueType.BOOLEAN, description="Show version"),
)


__all__ = (
    "ValueType",
    "OptionDefinition",
    "ArgumentDefinition",
    "CommandDefinition",
    "GlobalOptions",
    "DEFAULT_GLOBAL_OPTIONS",
    "long_flag",
    "short_flag",
)
