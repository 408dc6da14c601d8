"""
Argvet parser: validate an argument vector against a registry and query it.

What this module provides
- parse(registry, argv): read, check for missing arguments, coerce every
  present value, and publish the result as ParsedArguments.
- ParsedArguments: read-only mapping name → coerced value (the typed
  variants stay reachable through typed()).
- CommandLineArgs: the façade most tools use. Builds the registry from the
  required/optional declarations, parses on construction, and exposes
  specified() and get_value().

Failure model
- Every fault aborts the whole call; a new store is only published once all
  values have been validated, so a failed parse leaves the previous store as is.
- Nothing is printed and the process is never exited here. Catch
  ArgumentException and hand it to argvet.faults.report() if you want the
  rich rendering.

Quick start
    from argvet import CommandLineArgs

    args = CommandLineArgs(
        [{"arg": "name", "type": "string"}],
        [{"arg": "env", "enum": ["dev", "prod"], "def": "dev"},
         {"arg": "tags", "type": "csv", "def": []}],
        "--name=box --tags=a,b",
    )
    args.get_value("name")   # 'box'
    args.get_value("env")    # 'dev'
    args.get_value("tags")   # ('a', 'b')
    args.specified("env")    # False
"""
import difflib
import functools
import operator
import shlex
import sys
from collections.abc import Iterable, Mapping

from .faults import *
from .reader import read
from .specs import Registry
from .utils import *
from .values import coerce


def _tokenize(argv, /):
    """
    normalize an argument vector into a list of tokens.

    - Unset: sys.argv[1:]
    - str: shell-like string split with shlex.split
    - Iterable[str]: taken as-is (items must be strings)
    """
    if argv is Unset:
        return sys.argv[1:]
    if isinstance(argv, str):
        return shlex.split(argv)
    if isinstance(argv, Iterable):
        tokens = list(argv)
        if not all(isinstance(token, str) for token in tokens):
            raise TypeError("argument vector must be a string or an iterable of strings")
        return tokens
    raise TypeError("argument vector must be a string or an iterable of strings")


class ParsedArguments(Mapping):
    """
    Read-only store of the values supplied on the command line.

    Mapping access hands back plain values (str, bool, int or tuple of str);
    typed(name) hands back the tagged variant.
    """

    def __init__(self, values=(), /):
        self._values = dict(values)

    def typed(self, name, /):
        return self._values[name]

    def __getitem__(self, name, /):
        return self._values[name].value

    def __iter__(self):
        return iter(self._values)

    def __len__(self):
        return len(self._values)

    def __rich_repr__(self):
        for name, value in self._values.items():
            yield name, value.value

    def __repr__(self):
        return "parsed-arguments(%s)" % ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))


def parse(registry, argv=Unset, /):
    """
    Parse and validate an argument vector.

    Steps
    1. read the raw values of the registry's accepted options;
    2. collect every required name that is absent and fail with all of them;
    3. reject repeated options, then coerce each value by its kind;
    4. return the validated values as ParsedArguments.

    Raises
    - OptionValueRequiredError, MissingArgumentsError, MultipleValuesError,
      InternalInconsistencyError, or any coercion fault from argvet.values.
    """
    raw = read(registry.options, _tokenize(argv))

    missing = [name for name in registry if name not in raw and name not in registry.optionals]
    if missing:
        raise MissingArgumentsError(
            "missing argument(s): %s" % ", ".join(missing),
            title="missing arguments",
            code=FaultCode.MISSING_ARGUMENTS,
            hint="add %s" % " ".join("--%s=<value>" % name for name in missing),
            missing=tuple(missing),
        )

    values = {}
    for option, value in raw.items():
        if isinstance(value, tuple):
            raise MultipleValuesError(
                "multiple values found for argument %r, did you accidentally specify it more than once?" % option,
                title="option specified multiple times",
                code=FaultCode.MULTIPLE_VALUES,
                hint="keep a single --%s" % option,
                option=option,
                values=value,
            )
        try:
            spec = registry[option]
        except KeyError:
            raise InternalInconsistencyError(
                "code error parsing options: %r has no registry entry" % option,
                title="internal inconsistency",
                code=FaultCode.INTERNAL_INCONSISTENCY,
                hint="the reader returned an option the registry does not know",
                option=option,
            ) from None
        values[option] = coerce(spec, value)

    return ParsedArguments(values)


class CommandLineArgs:
    """
    Validated command-line arguments for a small tool.

    Parameters
    - required: Iterable[ArgumentSpec | Mapping] (positional-only)
      Declarations whose absence is an error.
    - optional: Iterable[ArgumentSpec | Mapping] (positional-only)
      Declarations that may be omitted; their "def" is the fallback value.
    - argv: Unset | str | Iterable[str]
      Argument vector; Unset reads sys.argv[1:].
    - parse: bool (keyword-only)
      Parse immediately (default). With False, call parse() later.

    Raises
    - any ArgumentException from parsing, and TypeError/ValueError for
      malformed declarations.
    """

    registry = property(lambda self: self._registry, doc="the Registry built from the declarations")

    def __init__(self, required=(), optional=(), /, argv=Unset, *, parse=True):
        self._required = required if isinstance(required, str | Mapping) else tuple(required)
        self._optional = optional if isinstance(optional, str | Mapping) else tuple(optional)
        self._argv = argv
        self._parsed = Unset
        self.register()
        if parse:
            self.parse()

    @classmethod
    def build(cls, required=(), optional=(), /, argv=Unset):
        """
        Factory form: build the registry and parse right away.
        """
        return cls(required, optional, argv)

    def register(self):
        """
        (Re)build the registry from the stored declarations.
        """
        self._registry = Registry(self._required, self._optional)

    def parse(self, argv=Unset, /):
        """
        Parse `argv` (or the vector given at construction) and publish the store.
        """
        self._parsed = parse(self._registry, coalesce(argv, self._argv))

    @property
    def parsed(self):
        if self._parsed is Unset:
            raise RuntimeError("arguments have not been parsed yet; call parse() first")
        return self._parsed

    def specified(self, name, /):
        """
        Whether `name` was given on the command line (a default does not count).
        """
        return name in self.parsed

    def get_value(self, name, default=Unset, /):
        """
        Look up an argument value.

        Resolution order
        1. the value given on the command line (default is ignored);
        2. UnrecognizedArgumentError when no declaration has this name;
        3. the `default` passed to this call, as-is;
        4. the declaration's "def", as-is;
        5. NoDefaultValueError.
        """
        parsed = self.parsed
        try:
            return parsed[name]
        except KeyError:
            pass

        if name not in self._registry:
            suggestions = difflib.get_close_matches(str(name), self._registry.keys(), 5)
            try:
                hint = "did you mean %r?" % suggestions[0]
            except IndexError:
                hint = "declare %r as a required or optional argument" % (name,)
            raise UnrecognizedArgumentError(
                "attempting to use unrecognized argument: %r. recognized arguments are: %s" % (
                    name, ", ".join(parsed)
                ),
                title="unrecognized argument",
                code=FaultCode.UNRECOGNIZED_ARGUMENT,
                hint=hint,
                argument=name,
                known=tuple(parsed),
                suggestions=suggestions,
            )

        if default is not Unset:
            return default

        try:
            return self._registry.defaults[name]
        except KeyError:
            raise NoDefaultValueError(
                "no default value for option: %r" % name,
                title="no default value",
                code=FaultCode.NO_DEFAULT_VALUE,
                hint="pass --%s=<value> or give a default to get_value()" % name,
                argument=name,
            ) from None

    def __rich_repr__(self):
        yield "registry", self._registry
        yield "parsed", coalesce(self._parsed)

    def __repr__(self):
        return "command-line-args(%s)" % ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))


__all__ = (
    "ParsedArguments",
    "CommandLineArgs",
    "parse",
)
