"""
Plainopts faults (parse and validation errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing issue.
- OptionFault: base exception carrying a message plus read-only context options
  (code, hint, option, token, ...). Faults know how to render themselves as a
  single "error: ..." line through rich.
- One subclass per fault kind so callers can match on type.

Integration
- The parser never raises faults at its caller. It builds one, renders it to its
  error sink, records it in Parser.faults, and reports failure via its return value.
- Hosts can relabel codes with a __codes__ mapping and restyle the output with a
  __styles__ mapping, both read from __main__.
"""
import copy
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.text import Text

from .utils import Unset


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - matching (2110x): UNKNOWN_OPTION, DUPLICATE_OPTION, MISPLACED_VALUE_OPTION
    - values (2111x): MISSING_VALUE, INVALID_INTEGER, INVALID_FLOAT
    - completeness (2112x): MISSING_REQUIRED_OPTION
    - validation (2113x): UNREADABLE_PATH
    """
    # --- matching ---
    UNKNOWN_OPTION              = 21101
    DUPLICATE_OPTION            = 21102
    MISPLACED_VALUE_OPTION      = 21103

    # --- values ---
    MISSING_VALUE               = 21111
    INVALID_INTEGER             = 21112
    INVALID_FLOAT               = 21113

    # --- completeness ---
    MISSING_REQUIRED_OPTION     = 21121

    # --- path validation ---
    UNREADABLE_PATH             = 21131

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class OptionFault(Exception):
    """
    Base class for every parse/validation fault.

    - message: one-sentence description (lowercase, mentions -x/--name when relevant).
    - options: read-only context. Recognized keys:
      • code: FaultCode
      • hint: short actionable advice
      • option: the related descriptor, when there is one
      • token: the offending command-line token or value
      • colorful: style the rendered line (default True)
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return self.message if self.message is not Unset else ""

    @property
    def code(self):
        return self.options.get("code")

    @property
    def hint(self):
        return self.options.get("hint")

    @property
    def option(self):
        return self.options.get("option")

    def __rich__(self):
        main = __import__("__main__")

        styles = defaultdict(str, {
            "error-label": "bold #FF4DA6",  # friendly pinky label
            "error-message": "#C8C8D0",  # soft light gray message
        } | getattr(main, "__styles__", {}))

        colorful = self.options.get("colorful", True)

        def styler(style):
            return styles[style] if colorful else ""

        return Text.assemble(
            ("error", styler("error-label")),
            ": ",
            (str(self), styler("error-message")),
        )

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class UnknownOptionError(OptionFault): ...
class DuplicateOptionError(OptionFault): ...
class MisplacedValueOptionError(OptionFault): ...
class MissingValueError(OptionFault): ...
class InvalidIntegerError(OptionFault): ...
class InvalidFloatError(OptionFault): ...
class MissingRequiredOptionError(OptionFault): ...
class UnreadablePathError(OptionFault): ...


def report(fault, sink, /, **options):
    """
    render a fault with the given runtime options and hand it to a sink.

    contract
    - fault must provide __rich__ and __replace__ (see OptionFault).
    - options are merged into the fault via copy.replace before rendering.
    - returns the merged fault so callers can record it.
    """
    if (
        not hasattr(fault, "__rich__") or
        not callable(fault.__rich__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("report() argument must have a __rich__ and __replace__ methods")
    fault = copy.replace(fault, **options)
    sink(fault.__rich__())
    return fault


__all__ = (
    "FaultCode",
    "OptionFault",
    "UnknownOptionError",
    "DuplicateOptionError",
    "MisplacedValueOptionError",
    "MissingValueError",
    "InvalidIntegerError",
    "InvalidFloatError",
    "MissingRequiredOptionError",
    "UnreadablePathError",
    "report",
)
