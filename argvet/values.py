"""
Typed values and coercion of raw tokens.

Each coerced value is one variant of a small tagged union, so the parsed
store never holds an untagged object:

- String  → string, regex and enum kinds (value kept as the raw str)
- Boolean → boolean kind
- Integer → int kind
- Listing → csv kind (tuple of str)

coerce(spec, raw) dispatches on spec.kind and either returns a variant or
raises the matching fault from argvet.faults.

Integer quirk
- int conversion is forgiving: leading whitespace and an optional sign are
  accepted, trailing garbage is ignored, and text without leading digits
  converts to 0 ("abc" → 0, "12abc" → 12). Existing command lines rely on it.
"""
import re
from dataclasses import dataclass

from .faults import *
from .specs import Kind

_TRUTHY = frozenset({"1", "true", "t"})
_FALSY = frozenset({"0", "false", "f"})

# base-10, ASCII digits only regardless of locale
_INTEGER = re.compile(r"\s*([+-]?\d+)", re.ASCII)


@dataclass(frozen=True, slots=True)
class String:
    value: str
    kind: Kind = Kind.STRING


@dataclass(frozen=True, slots=True)
class Boolean:
    value: bool
    kind: Kind = Kind.BOOLEAN


@dataclass(frozen=True, slots=True)
class Integer:
    value: int
    kind: Kind = Kind.INT


@dataclass(frozen=True, slots=True)
class Listing:
    value: tuple[str, ...]
    kind: Kind = Kind.CSV


TypedValue = String | Boolean | Integer | Listing


def to_boolean(raw, /, *, option=None):
    """
    map a raw token to a bool, case-insensitively.

    - "1", "true", "t"  → True
    - "0", "false", "f" → False
    - anything else     → InvalidBooleanValueError
    """
    token = str(raw).lower()
    if token in _TRUTHY:
        return True
    if token in _FALSY:
        return False
    raise InvalidBooleanValueError(
        "unhandled boolean value %r for argument %r" % (raw, option),
        title="invalid boolean value",
        code=FaultCode.INVALID_BOOLEAN_VALUE,
        hint="use one of 1, true, t, 0, false or f (any case)",
        option=option,
        value=raw,
    )


def to_integer(raw, /):
    """
    forgiving base-10 conversion; text without leading digits yields 0.
    """
    match = _INTEGER.match(raw)
    return int(match[1]) if match else 0


def coerce(spec, raw, /):
    """
    Validate and convert one raw token according to its spec.

    Parameters
    - spec: ArgumentSpec
      The registry entry of the option the token belongs to.
    - raw: str
      The token as read from the argument vector.

    Returns
    - TypedValue: the variant matching spec.kind.

    Raises
    - InvalidEnumValueError, InvalidBooleanValueError, InvalidStringSourceError,
      InvalidIntegerSourceError or UnhandledTypeError.
    """
    option = spec.name
    match spec.kind:
        case Kind.ENUM:
            if raw not in spec.choices:
                raise InvalidEnumValueError(
                    "argument %r must be one of these values: %s" % (option, ", ".join(spec.choices)),
                    title="invalid enum value",
                    code=FaultCode.INVALID_ENUM_VALUE,
                    hint="pick one of %s (for example: --%s=%s)" % (
                        ", ".join(map(repr, spec.choices)), option, spec.choices[0]
                    ),
                    option=option,
                    value=raw,
                    choices=spec.choices,
                )
            return String(raw, Kind.ENUM)
        case Kind.BOOLEAN:
            return Boolean(to_boolean(raw, option=option))
        case Kind.STRING | Kind.REGEX:
            if not isinstance(raw, str):
                raise InvalidStringSourceError(
                    "argument is not in string format: %r" % option,
                    title="invalid string source",
                    code=FaultCode.INVALID_STRING_SOURCE,
                    hint="pass the value as text (for example: --%s=<value>)" % option,
                    option=option,
                    value=raw,
                )
            return String(raw, spec.kind)
        case Kind.INT:
            # raw tokens always arrive as text; a native int means the caller bypassed the reader
            if isinstance(raw, int):
                raise InvalidIntegerSourceError(
                    "argument is not in int format: %r" % option,
                    title="invalid integer source",
                    code=FaultCode.INVALID_INTEGER_SOURCE,
                    hint="pass the value as text (for example: --%s=42)" % option,
                    option=option,
                    value=raw,
                )
            return Integer(to_integer(raw))
        case Kind.CSV:
            return Listing(tuple(str(raw).split(",")))
        case _:
            raise UnhandledTypeError(
                "unhandled argument type: %r" % (spec.kind,),
                title="unhandled argument type",
                code=FaultCode.UNHANDLED_TYPE,
                hint="declare %r with one of: %s" % (option, ", ".join(Kind)),
                option=option,
                kind=spec.kind,
            )


__all__ = (
    "String",
    "Boolean",
    "Integer",
    "Listing",
    "TypedValue",
    "to_boolean",
    "to_integer",
    "coerce",
)
