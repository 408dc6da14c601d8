"""
Raw argument vector reader.

read(options, tokens) walks argv-like tokens and collects the raw values of
the accepted options:

- '--name=value' → value taken inline (may be empty)
- '--name value' → value taken from the next token; a missing value (end of
  input, '--' or another long switch) raises OptionValueRequiredError
- unknown switches are skipped
- reading stops at '--' or at the first token that is not a switch
- an option seen more than once is kept with all its values as a tuple, so
  the parser can reject it instead of silently keeping the last one
"""
from collections import deque

from .faults import FaultCode, OptionValueRequiredError


def _missing(tokens):
    return not tokens or tokens[0].startswith("--")


def read(options, tokens, /):
    """
    collect raw values for the accepted options.

    parameters
    - options: Iterable[Option]
      accepted-option descriptors (Registry.options).
    - tokens: Iterable[str]
      the argument vector without the program name.

    returns
    - dict[str, str | tuple[str, ...]]: option name → raw token, or a tuple of
      raw tokens when the option appeared more than once.
    """
    switches = {option.switch: option for option in options}
    tokens = deque(tokens)
    raw = {}

    while tokens:
        token = tokens.popleft()
        if token == "--" or token == "-" or not token.startswith("-"):
            break

        input, separator, value = token.partition("=")
        try:
            option = switches[input]
        except KeyError:
            continue

        if not separator:
            if _missing(tokens):
                raise OptionValueRequiredError(
                    "option %r expects a value" % input,
                    title="option value required",
                    code=FaultCode.OPTION_VALUE_REQUIRED,
                    hint="pass a value (for example: %s=<value> or %s <value>)" % (input, input),
                    option=option.name,
                )
            value = tokens.popleft()

        if option.name not in raw:
            raw[option.name] = value
        elif isinstance(previous := raw[option.name], tuple):
            raw[option.name] = previous + (value,)
        else:
            raw[option.name] = (previous, value)

    return raw


__all__ = (
    "read",
)
