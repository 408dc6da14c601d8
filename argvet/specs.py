r"""
Argvet argument specifications and the registry built from them.

Overview
- Kind: the declared value type of an argument (string, boolean, int, csv, regex, enum).
- ArgumentSpec: one declared argument (name, kind, enum choices, default, required).
- Registry: the immutable structure derived from the required and optional
  declarations (type map, default map, optional names, accepted options).

Declarations
- Specs may be given as ArgumentSpec instances or as plain mappings:
    {"arg": "name", "type": "string"}
    {"arg": "env", "enum": ["dev", "prod"], "def": "dev"}
  "enum" takes precedence over "type"; "def" is only honored for optional
  declarations.

Duplicate names
- Declarations are registered in order, required first then optional, and the
  last declaration of a name wins outright (kind, choices, default and
  requirement). Each overwrite emits a DuplicateArgumentWarning.

Unknown kinds
- A kind tag that is not a Kind member is kept verbatim. Registration accepts
  it; coercing a value for it raises UnhandledTypeError.

Quick example:
    >>> registry = Registry.build(
    ...     [{"arg": "name", "type": "string"}],
    ...     [{"arg": "env", "enum": ["dev", "prod"], "def": "dev"}],
    ... )
    >>> registry.types["env"]
    <Kind.ENUM: 'enum'>
    >>> registry.defaults["env"]
    'dev'
"""
import functools
import operator
import warnings
from collections import namedtuple
from collections.abc import Iterable, Mapping
from enum import StrEnum

from .faults import DuplicateArgumentWarning, FaultCode
from .utils import *


class Kind(StrEnum):
    """
    declared value type of an argument.
    """
    STRING  = "string"
    BOOLEAN = "boolean"
    INT     = "int"
    CSV     = "csv"
    REGEX   = "regex"
    ENUM    = "enum"

    @classmethod
    def resolve(cls, tag, /):
        """
        return the Kind member for `tag`, or `tag` itself when it names no kind.
        """
        try:
            return cls(tag)
        except ValueError:
            return tag


Option = namedtuple("Option", ("name", "required"))
Option.__doc__ = """
accepted-option descriptor handed to the reader.

every option takes exactly one value token; `required` only tells whether its
absence is an error.
"""
Option.switch = property(lambda self: "--" + self.name, doc="long-option spelling, e.g. '--name'")


class ArgumentSpec:
    """
    Declaration of one recognized argument.

    Parameters
    - name: str (positional-only)
      Identifier used on the command line as --name and by the accessors.
    - kind: Kind | str (positional-only, optional when choices are given)
      Declared value type.
    - choices: Iterable[str]
      Allowed raw values; turns the spec into an enum and wins over `kind`.
    - default: any
      Spec-level default. Only kept for optional specs.
    - required: bool
      Whether absence on the command line is an error.

    Raises
    - TypeError: wrong parameter types, or neither kind nor choices declared.
    - ValueError: empty/invalid name or empty choices.
    """
    __slots__ = ("_name", "_kind", "_choices", "_default", "_required")

    name = mirror("name")
    kind = mirror("kind")
    choices = mirror("choices")
    default = property(lambda self: self._default, doc="spec-level default, handed back as declared (Unset when absent)")
    required = mirror("required")

    def __init__(self, name, kind=Unset, /, *, choices=Unset, default=Unset, required=True):
        if not isinstance(name, str):
            raise TypeError("argument name must be a string")
        elif not name or name != name.strip() or name.startswith("-") or "=" in name:
            raise ValueError("argument name %r must be a non-empty word without '-' prefix or '='" % name)

        if not isinstance(required, bool):
            raise TypeError("argument 'required' must be a boolean")

        if choices is not Unset:
            if isinstance(choices, str) or not isinstance(choices, Iterable):
                raise TypeError("argument %r choices must be an iterable of strings" % name)
            choices = tuple(choices)
            if not choices:
                raise ValueError("argument %r choices cannot be empty" % name)
            if not all(isinstance(choice, str) for choice in choices):
                raise TypeError("argument %r choices must be strings" % name)
            kind = Kind.ENUM
        elif kind is Unset:
            raise TypeError("argument %r must declare a type or an enum" % name)
        else:
            kind = Kind.resolve(kind)
            if kind is Kind.ENUM:
                raise TypeError("argument %r of type 'enum' must declare its choices" % name)
            choices = ()

        self._name = name
        self._kind = kind
        self._choices = choices
        self._default = Unset if required else default
        self._required = required

    @classmethod
    def of(cls, declaration, /, *, required):
        """
        Build a spec from a declaration mapping or re-home an existing spec.

        Accepted forms
        - ArgumentSpec: copied with `required` set to the list it was declared in.
        - Mapping: keys "arg", "type" or "enum", and optionally "def".
        """
        if isinstance(declaration, ArgumentSpec):
            return cls(
                declaration.name,
                declaration.kind,
                choices=declaration.choices if declaration.kind is Kind.ENUM else Unset,
                default=declaration.default,
                required=required,
            )
        if not isinstance(declaration, Mapping):
            raise TypeError("argument declaration must be a mapping or an ArgumentSpec")
        try:
            name = declaration["arg"]
        except KeyError:
            raise TypeError("argument declaration must have an 'arg' key") from None
        return cls(
            name,
            declaration.get("type", Unset),
            choices=declaration.get("enum", Unset),
            default=declaration.get("def", Unset),
            required=required,
        )

    def __eq__(self, other):
        if not isinstance(other, ArgumentSpec):
            return NotImplemented
        return tuple(self.__rich_repr__()) == tuple(other.__rich_repr__())

    def __hash__(self):
        return hash((self._name, self._kind, self._choices, self._required))

    def __rich_repr__(self):
        yield "name", self._name
        yield "kind", self._kind
        if self._kind is Kind.ENUM:
            yield "choices", self._choices
        if self._default is not Unset:
            yield "default", self._default
        yield "required", self._required

    def __repr__(self):
        return "argument-spec(%s)" % ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))


class Registry(Mapping):
    """
    Immutable name → ArgumentSpec mapping derived from the declarations.

    Views (read-only)
    - types: name → Kind (or the verbatim unknown tag).
    - defaults: name → spec-level default, optional specs that declared one.
    - optionals: names declared optional.
    - options: accepted-option descriptors, in registration order.
    """

    types = mirror("types")
    defaults = mirror("defaults")
    optionals = mirror("optionals")
    options = mirror("options")

    def __init__(self, required=(), optional=(), /):
        specs = {}
        for flag, declarations in ((True, required), (False, optional)):
            if isinstance(declarations, str | Mapping) or not isinstance(declarations, Iterable):
                raise TypeError("argument declarations must be an iterable of declarations")
            for declaration in declarations:
                spec = ArgumentSpec.of(declaration, required=flag)
                if spec.name in specs:
                    warnings.warn(DuplicateArgumentWarning(
                        "argument %r is declared more than once; the last declaration wins" % spec.name,
                        title="duplicate argument",
                        code=FaultCode.DUPLICATE_ARGUMENT,
                        hint="remove one of the %r declarations" % spec.name,
                        argument=spec.name,
                        previous=specs[spec.name],
                        current=spec,
                    ), stacklevel=2)
                specs[spec.name] = spec

        self._specs = specs
        self._types = {name: spec.kind for name, spec in specs.items()}
        self._defaults = {
            name: spec.default for name, spec in specs.items()
            if not spec.required and spec.default is not Unset
        }
        self._optionals = frozenset(name for name, spec in specs.items() if not spec.required)
        self._options = tuple(Option(name, spec.required) for name, spec in specs.items())

    @classmethod
    def build(cls, required=(), optional=(), /):
        return cls(required, optional)

    def __getitem__(self, name, /):
        return self._specs[name]

    def __iter__(self):
        return iter(self._specs)

    def __len__(self):
        return len(self._specs)

    def __rich_repr__(self):
        yield from self._specs.values()

    def __repr__(self):
        return "registry(%s)" % ", ".join(map(repr, self._specs.values()))


__all__ = (
    "Kind",
    "Option",
    "ArgumentSpec",
    "Registry",
)
