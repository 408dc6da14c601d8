"""
Argvet faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every failure the
  registry, the parser and the accessors can raise.
- ArgumentException / ArgumentWarning: base types that carry a message plus
  read-only options (code, title, hint and context) and know how to render
  themselves with rich.
- report(): the collaborator side. Renders a fault to stderr and returns the
  exit status the host should use; it never exits by itself.

Integration
- The parser raises faults; it never prints and never exits.
- Host applications catch ArgumentException around construction/parsing and
  decide what to do, typically `sys.exit(report(fault))`.
- Rendering is customisable from the host's __main__ module:
  __prog__ (program name), __styles__ (style overrides), __codes__ (code labels).
"""
import sys
from collections import defaultdict
from enum import IntEnum
from pathlib import Path
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - parsing (2110x)
      • MISSING_ARGUMENTS, MULTIPLE_VALUES, OPTION_VALUE_REQUIRED
    - coercion (2112x)
      • INVALID_ENUM_VALUE, INVALID_BOOLEAN_VALUE, INVALID_INTEGER_SOURCE,
        INVALID_STRING_SOURCE, UNHANDLED_TYPE
    - lookup (2113x)
      • UNRECOGNIZED_ARGUMENT, NO_DEFAULT_VALUE
    - invariants (2119x)
      • INTERNAL_INCONSISTENCY
    - warnings (22xxx)
      • DUPLICATE_ARGUMENT
    """
    # --- parsing errors (21xxx) ---
    MISSING_ARGUMENTS       = 21101
    MULTIPLE_VALUES         = 21102
    OPTION_VALUE_REQUIRED   = 21103

    # --- coercion errors (21xxx) ---
    INVALID_ENUM_VALUE      = 21121
    INVALID_BOOLEAN_VALUE   = 21122
    INVALID_INTEGER_SOURCE  = 21123
    INVALID_STRING_SOURCE   = 21124
    UNHANDLED_TYPE          = 21125

    # --- lookup errors (21xxx) ---
    UNRECOGNIZED_ARGUMENT   = 21131
    NO_DEFAULT_VALUE        = 21132

    # --- invariant errors (21xxx) ---
    INTERNAL_INCONSISTENCY  = 21191

    # --- warnings (22xxx) ---
    DUPLICATE_ARGUMENT      = 22111

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _render(fault, defaults, /):
    main = __import__("__main__")

    styles = defaultdict(str, defaults | getattr(main, "__styles__", {}))
    colorful = fault.options.get("colorful", True)
    fancy = fault.options.get("fancy", False)

    def styler(style):
        return styles[style] if colorful else ""

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not colorful:
            return Text(str(fragment))
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), style)

    prog = text(getattr(main, "__prog__", fault.options.get("prog") or Path(sys.argv[0]).name), styler("prog-name"))

    code = fault.options.get("code")
    header = Text.assemble(
        "[ ",
        prog,
        " — ",
        text(code.normalize() if isinstance(code, FaultCode) else "?", styler("code")),
        " | ",
        text(str(fault.options.get("title", "")).title(), styler("title")),
        " ]"
    )
    message = text(fault.message, styler("message"))
    hint = Text.assemble(text(" → ", styler("hint-arrow")), text(fault.options.get("hint"), styler("hint")))

    if fancy:
        return Panel(Group(message, hint), title=header, title_align="left")

    return Group(header, message, hint)


class ArgumentException(Exception):
    """
    base type of every argvet error.

    attributes
    - message: one-sentence, lowercased description.
    - options: read-only mapping with at least 'code', 'title' and 'hint', plus
      fault-specific context (e.g. 'missing', 'option', 'choices', 'value').
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return str(self.message)

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "title": "bold #FF4DA6",  # friendly pinky title
            "message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        })

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class MissingArgumentsError(ArgumentException): ...
class MultipleValuesError(ArgumentException): ...
class OptionValueRequiredError(ArgumentException): ...
class InvalidEnumValueError(ArgumentException): ...
class InvalidBooleanValueError(ArgumentException): ...
class InvalidIntegerSourceError(ArgumentException): ...
class InvalidStringSourceError(ArgumentException): ...
class UnhandledTypeError(ArgumentException): ...
class UnrecognizedArgumentError(ArgumentException): ...
class NoDefaultValueError(ArgumentException): ...
class InternalInconsistencyError(ArgumentException): ...


class ArgumentWarning(Warning):
    """
    base type of every argvet warning (emitted through warnings.warn).
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return str(self.message)

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #FFB400",  # amber fault code for warnings
            "title": "bold #FFC2E0",  # softer pinky title for warnings
            "message": "#D6D6DE",  # slightly lighter gray body
            "hint-arrow": "#B8EFAF dim",  # softer green arrow
            "hint": "italic #B8EFAF",  # softer green hint text
        })

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class DuplicateArgumentWarning(ArgumentWarning): ...


def report(fault, /, *, colorful=True, fancy=False):
    """
    render a fault on stderr and return the exit status for the host.

    contract
    - fault must be an ArgumentException or an ArgumentWarning.
    - runtime flags are merged into a copy of the fault via __replace__; the
      original fault is left untouched.
    - returns 1 for errors and 0 for warnings; the caller decides whether to exit.
    """
    if not isinstance(fault, ArgumentException | ArgumentWarning):
        raise TypeError("report() argument must be an argument exception or warning")
    console.print(fault.__replace__(colorful=colorful, fancy=fancy))
    return int(isinstance(fault, ArgumentException))


__all__ = (
    "ArgumentException",
    "MissingArgumentsError",
    "MultipleValuesError",
    "OptionValueRequiredError",
    "InvalidEnumValueError",
    "InvalidBooleanValueError",
    "InvalidIntegerSourceError",
    "InvalidStringSourceError",
    "UnhandledTypeError",
    "UnrecognizedArgumentError",
    "NoDefaultValueError",
    "InternalInconsistencyError",
    "ArgumentWarning",
    "DuplicateArgumentWarning",
    "FaultCode",
    "report",
)
