"""
Plainopts parser: match argv tokens against option descriptors.

What this module provides
- Parser: owns an ordered tuple of descriptors (see plainopts.options), consumes
  one argument vector, writes converted values into the caller's cells, and
  collects positional tokens.

Token grammar
- "name", "-"          → positional; appended to Parser.remaining.
- "--long"             → the option whose long name matches exactly.
- "-abc"               → a cluster of short names read left to right. Flags and
                         counters may appear anywhere in a cluster; an option
                         that takes a value may only be last, and its value is
                         the next whole token ("-vvS file").

Faults
- Structural faults stop parsing at the first occurrence: unknown option,
  duplicate option, misplaced value option, missing value, invalid integer or
  float. Missing required options are checked once every token is consumed
  and all of them are reported.
- Every fault is rendered as one "error: ..." line to the error sink and kept in
  Parser.faults; parse() itself only returns True or False.

Quick start
    from plainopts import Parser, Cell, String, FlagCount

    input = Cell()
    verbosity = Cell(0)
    parser = Parser(
        String("i", "input-file", "input file", True, input),
        FlagCount("v", "verbose", "verbose logging", verbosity),
    )
    if not parser.parse():
        parser.print_usage()
        raise SystemExit(1)

Design notes
- A parser is single-use: a second parse() raises RuntimeError, because the
  seen flags of its descriptors are never reset. Those descriptors are copies
  taken at construction, so parsers never share seen flags.
- Sinks are plain callables receiving one rich renderable per line, so both
  print and list.append work. Both default to a stderr rich console.
"""
import copy
import difflib
import shlex
import sys
from collections import defaultdict, deque
from collections.abc import Iterable

from rich.console import Console
from rich.text import Text

from .faults import *
from .options import *
from .utils import *

console = Console(stderr=True)


class Parser:
    """
    Command-line parser over a fixed, ordered set of option descriptors.

    Properties (read-only)
    - options: descriptors in registration order.
    - remaining: positional tokens in encounter order.
    - program: argv[0] of the parsed vector (None before parsing).
    - faults: faults reported by parse() and validate_paths().
    - parsed: whether parse() already ran.
    - colorful: whether rendered lines carry styles.
    """

    __introspectable__ = (
        "options",
        "remaining",
        "program",
        "faults",
        "parsed",
        "colorful",
    )

    options = mirror("options")
    remaining = mirror("remaining")
    program = mirror("program")
    faults = mirror("faults")
    parsed = mirror("parsed")
    colorful = mirror("colorful")

    def __init__(self, *options, error=Unset, usage=Unset, colorful=True):
        """
        Parameters
        - options: descriptors built with Flag, FlagCount, Int, Float, String,
          Path or PathExisting. Short and long names must be unique. The parser
          keeps its own copies (see Parser.options), so a descriptor may be
          handed to several parsers; all of them write into the same cell.
        - error: sink for fault lines (defaults to a stderr rich console).
        - usage: sink for usage lines (defaults to a stderr rich console).
        - colorful: style rendered lines with the palette (see __styles__).

        Raises
        - TypeError: non-descriptor options or non-callable sinks.
        - ValueError: two descriptors sharing a short or a long name, including
          the same descriptor passed twice.
        """
        self._shorts = {}
        self._longs = {}
        for option in options:
            if not isinstance(option, Option):
                raise TypeError("Parser() arguments must be options")
            if option.short in self._shorts:
                raise ValueError(f"short name {option.short!r} is already used by {self._shorts[option.short].names}")
            if option.long in self._longs:
                raise ValueError(f"long name {option.long!r} is already used by {self._longs[option.long].names}")
            # seen flags belong to this parser, cells stay shared with the caller
            self._shorts[option.short] = self._longs[option.long] = copy.replace(option, seen=False)

        if not callable(error := coalesce(error, console.print)):
            raise TypeError("Parser() 'error' must be callable")
        if not callable(usage := coalesce(usage, console.print)):
            raise TypeError("Parser() 'usage' must be callable")

        self._options = tuple(self._shorts.values())
        self._remaining = []
        self._program = None
        self._faults = []
        self._parsed = False
        self._error = error
        self._usage = usage
        self._colorful = bool(colorful)

    def __repr__(self):
        return "parser(%s)" % ", ".join("%s=%r" % (name, getattr(self, name)) for name in self.__introspectable__)

    def __rich_repr__(self):
        for name in self.__introspectable__:
            yield name, getattr(self, name)

    def _fail(self, fault):
        # Report, remember, and signal failure to the caller in one step.
        self._faults.append(report(fault, self._error, colorful=self._colorful))
        return False

    def _apply(self, option, tokens):
        """
        apply a matched option, consuming its value token when it takes one.

        returns True on success, False once a fault has been reported.
        """
        if not option.repeatable and option.seen:
            return self._fail(DuplicateOptionError(
                "option %s shouldn't be specified more than once" % option.names,
                code=FaultCode.DUPLICATE_OPTION,
                hint="remove the repeated -%s/--%s" % (option.short, option.long),
                option=option,
            ))
        option._seen = True

        if not option.arity:
            option.__apply__()
            return True

        try:
            value = tokens.popleft()
        except IndexError:
            return self._fail(MissingValueError(
                "option %s requires a parameter" % option.names,
                code=FaultCode.MISSING_VALUE,
                hint="pass a <%s> right after it (for example: --%s <%s>)" % (option.label, option.long, option.label),
                option=option,
            ))

        if option.__accepts__(value):
            try:
                option.__apply__(value)
            except ValueError:
                pass  # grammar matched but the conversion refused it (digit limit, overflow)
            else:
                return True

        match option:
            case Int():
                return self._fail(InvalidIntegerError(
                    "invalid integer value \"%s\" specified for option %s" % (value, option.names),
                    code=FaultCode.INVALID_INTEGER,
                    hint="use base-10 digits with an optional sign (for example: 42 or -7)",
                    option=option,
                    token=value,
                ))
            case Float():
                return self._fail(InvalidFloatError(
                    "invalid float value \"%s\" specified for option %s" % (value, option.names),
                    code=FaultCode.INVALID_FLOAT,
                    hint="use a decimal number, optionally with an exponent (for example: 0.5 or 1e-3)",
                    option=option,
                    token=value,
                ))
            case _:
                raise RuntimeError(f"{type(option).__typename__} rejected a value without a fault kind")

    def _parse_long(self, token, tokens):
        """
        match a "--name" token against long names.
        """
        name = token[2:]
        try:
            option = self._longs[name]
        except KeyError:
            head, equals, _ = name.partition("=")
            if equals and head in self._longs:
                hint = "pass the value as the next token (for example: --%s <value>)" % head
            elif suggestions := difflib.get_close_matches(name, self._longs.keys(), 1):
                hint = "did you mean '--%s'?" % suggestions[0]
            else:
                hint = "check the options list for valid names"
            return self._fail(UnknownOptionError(
                "unknown option %s" % token,
                code=FaultCode.UNKNOWN_OPTION,
                hint=hint,
                token=token,
            ))
        return self._apply(option, tokens)

    def _parse_cluster(self, token, tokens):
        """
        match a "-abc" token character by character against short names.
        """
        last = len(token) - 1
        for index, short in enumerate(token[1:], 1):
            try:
                option = self._shorts[short]
            except KeyError:
                return self._fail(UnknownOptionError(
                    "unknown short option -%s" % short,
                    code=FaultCode.UNKNOWN_OPTION,
                    hint="check the options list for valid names",
                    token=token,
                ))
            # a value must follow as the next whole token, so only the last short may take one
            if option.arity and index < last:
                return self._fail(MisplacedValueOptionError(
                    "short option -%s cannot be used in the middle of a flag list, it requires a value" % short,
                    code=FaultCode.MISPLACED_VALUE_OPTION,
                    hint="move -%s to the end of %r, or pass it on its own" % (short, token),
                    option=option,
                    token=token,
                ))
            if not self._apply(option, tokens):
                return False
        return True

    def parse(self, argv=Unset, /):
        """
        Parse one argument vector into the descriptors' cells.

        Parameters
        - argv:
          • Unset: read sys.argv.
          • str: shell-like string, split with shlex.split.
          • Iterable[str]: pre-tokenized vector; element 0 is the program name.
          Tokens are used verbatim and the input is never mutated.

        Returns
        - True when every token was matched or collected and every required
          option was seen; False otherwise (faults were reported).

        Raises
        - RuntimeError: when called a second time on the same parser.
        - TypeError: when argv is not a string or an iterable of strings.
        """
        if self._parsed:
            raise RuntimeError("parse() can only be called once per parser")

        if argv is Unset:
            argv = list(sys.argv)
        elif isinstance(argv, str):
            argv = shlex.split(argv)
        elif isinstance(argv, Iterable):
            argv = list(argv)
            if not all(isinstance(token, str) for token in argv):
                raise TypeError("parse() argument must be a string or an iterable of strings")
        else:
            raise TypeError("parse() argument must be a string or an iterable of strings")

        self._parsed = True
        tokens = deque(argv)
        self._program = tokens.popleft() if tokens else None

        while tokens:
            token = tokens.popleft()
            if not token.startswith("-") or token == "-":
                self._remaining.append(token)
            elif token.startswith("--"):
                if not self._parse_long(token, tokens):
                    return False
            elif not self._parse_cluster(token, tokens):
                return False

        success = True
        for option in self._options:
            if option.required and not option.seen:
                success = self._fail(MissingRequiredOptionError(
                    "option %s is required" % option.names,
                    code=FaultCode.MISSING_REQUIRED_OPTION,
                    hint="add --%s <%s>" % (option.long, option.label),
                    option=option,
                ))
        return success

    def validate_paths(self):
        """
        Check that every PathExisting option names a file that can be opened
        for reading.

        Options whose cell holds no string (absent and without default) are
        skipped. Every unreadable path is reported, not only the first, and the
        reported faults are appended to Parser.faults like those of parse().
        No cell, seen flag, or positional token is touched.

        Returns
        - True when all checked paths are readable.
        """
        valid = True
        for option in self._options:
            if not isinstance(option, PathExisting) or not isinstance(path := option.storage.value, str):
                continue
            try:
                with open(path, "rb"):
                    pass
            except OSError as exception:
                valid = self._fail(UnreadablePathError(
                    "option %s requires a readable file" % option.names,
                    code=FaultCode.UNREADABLE_PATH,
                    hint=exception.strerror or "check that %r exists and is readable" % path,
                    option=option,
                    token=path,
                ))
        return valid

    def usage_lines(self):
        """
        Render the options listing as a list of rich Text lines.

        Layout
            Options:
              -i, --input-file <string>\tinput file (required)
              -v, --verbose\tverbose logging

        Palette keys (override through __styles__ in __main__)
        - usage-header, option-name, flag-name, metavar, argument-description, required
        """
        styles = defaultdict(str, {
            "usage-header": "bold #FFFFFF",  # Pure white header
            "option-name": "bold #00E6FF",  # CYAN for options
            "flag-name": "bold #22C55E",  # GREEN for flags
            "metavar": "bold #FFD600",  # AMBER for value labels
            "argument-description": "#9CA3AF",  # Muted gray
            "required": "italic #FF4D94",  # MAGENTA marker
        } | getattr(__import__("__main__"), "__styles__", {}))

        def styler(style):
            return styles[style] if self._colorful else ""

        lines = [Text("Options:", styler("usage-header"))]
        for option in self._options:
            style = styler("option-name" if option.arity else "flag-name")
            line = Text("  ")
            line.append("-" + option.short, style).append(", ").append("--" + option.long, style)
            if option.arity:
                line.append(" ").append("<%s>" % option.label, styler("metavar"))
            line.append("\t").append(option.descr, styler("argument-description"))
            if option.required:
                line.append(" ").append("(required)", styler("required"))
            lines.append(line)
        return lines

    def print_usage(self):
        """
        Send the options listing to the usage sink, one line per call.
        """
        for line in self.usage_lines():
            self._usage(line)


__all__ = (
    "Parser",
)
