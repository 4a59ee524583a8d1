r"""
Plainopts option descriptors.

Overview
- Option: abstract base of a closed family of descriptor kinds. Each kind fixes
  its arity (whether a value token follows), its usage label, and how a token
  is stored into the caller's Cell.

  kind           arity  label     stored value
  ─────────────  ─────  ────────  ─────────────────────────────────────
  Flag           0      flag      True
  FlagCount      0      flag      previous count + 1 (repeatable)
  Int            1      integer   int, token must match [+-]?[0-9]+
  Float          1      float     float, decimal or scientific notation
  String         1      string    token verbatim
  Path           1      path      token verbatim (never checked)
  PathExisting   1      path      token verbatim (checked by Parser.validate_paths)

- Constructors take their arguments in this order:
    Flag(short, long, descr, storage)
    FlagCount(short, long, descr, storage)
    Int/Float/String/Path/PathExisting(short, long, descr, required, storage)

Metadata (sanitized on construction)
- short: one letter or digit, e.g. "v" (used as -v, and inside clusters like -vvv).
- long: at least two characters matching r"[^\W\d_](-?[^\W_]+)*", e.g. "input-file".
- descr: non-empty help text, trimmed.
- required: bool; always False for Flag and FlagCount.
- storage: the caller's Cell. FlagCount cells must start with an int.

Kinds are sealed: they cannot be subclassed, which keeps the family closed so
the parser can dispatch over it exhaustively.

Quick example:
    >>> from plainopts import Cell, Int, Flag
    >>> threads = Cell(1)
    >>> Int("t", "threads", "worker threads", False, threads)
    int(short='t', long='threads', descr='worker threads', required=False, storage=cell(1), seen=False)
"""
import functools
import math
import operator
import re

from .cells import Cell
from .utils import *


class OptionType(type):
    """
    Metaclass for descriptor kinds.

    Responsibilities
    - Record the per-kind class options (arity, label, repeatable) as class attributes.
    - Derive __typename__ from the class name ("PathExisting" -> "path-existing").
    - Expose the names listed in __introspectable__ as read-only properties (see mirror()).
    - Provide stable __repr__/__rich_repr__ implementations.
    - Seal concrete kinds against subclassing when created with sealed=True.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, *, arity=Unset, label=Unset, repeatable=Unset, sealed=False):
        # Class options override inherited defaults only when given.
        for option, object in (("arity", arity), ("label", label), ("repeatable", repeatable)):
            if object is not Unset:
                namespace[option] = object

        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        if sealed:
            @rename("__init_subclass__")
            def __init_subclass__(cls, **options):  # NOQA: F-841
                raise TypeError(f"type {self.__name__!r} is not an acceptable base type")
            self.__init_subclass__ = classmethod(__init_subclass__)

        return self


def _sanitize_names(cls, metadata, /):
    """
    Internal: validate the short and long names of a descriptor.

    Rules
    - short: exactly one Unicode letter or digit (no dash, no underscore).
    - long: two or more characters; hyphen-separated segments that start with a
      letter, e.g. "verbose", "input-file". Leading dashes are not part of the name.

    Raises
    - TypeError: when a name is not a string.
    - ValueError: when a name is malformed.
    """
    if not isinstance(short := metadata["short"], str):
        raise TypeError(f"{cls.__typename__} short name must be a string")
    elif not re.fullmatch(r"[^\W_]", short):
        raise ValueError(f"{cls.__typename__} short name must be a single letter or digit, got {short!r}")

    if not isinstance(long := metadata["long"], str):
        raise TypeError(f"{cls.__typename__} long name must be a string")
    elif len(long) < 2 or not re.fullmatch(r"[^\W\d_](-?[^\W_]+)*", long):
        raise ValueError(f"{cls.__typename__} long name must be a multi-character shell-style name, got {long!r}")


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: normalize descr/required and check the storage cell.

    - descr: must be a string, non-empty after trimming (stored trimmed).
    - required: coerced to bool.
    - storage: must be a Cell; kinds that increment (FlagCount) need an int in it.
    """
    if not isinstance(descr := metadata["descr"], str):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    metadata["descr"] = descr

    metadata["required"] = bool(metadata["required"])

    if not isinstance(storage := metadata["storage"], Cell):
        raise TypeError(f"{cls.__typename__} 'storage' must be a cell")
    if cls.repeatable and (isinstance(storage.value, bool) or not isinstance(storage.value, int)):
        raise TypeError(f"{cls.__typename__} 'storage' must hold an integer")


class Option(metaclass=OptionType, arity=1, label=None, repeatable=False):
    """
    Abstract option descriptor: identity, help text, required-ness, and the
    caller's storage cell.

    Properties
    - short, long, descr, required, storage: fixed at construction.
    - seen: False until the parser matches the option; never reset. A Parser
      works on its own copies, so the flag of a descriptor handed to it stays False.

    Kind contract
    - arity: number of value tokens consumed (0 or 1).
    - label: usage label shown for value-taking options.
    - repeatable: whether the option may be matched more than once.
    - __apply__(token): store the (already validated) token into the cell.
    """

    __introspectable__ = (
        "short",
        "long",
        "descr",
        "required",
        "storage",
        "seen",
    )

    def __new__(cls, short, long, descr, required, storage):
        if cls is Option:
            raise TypeError("type 'Option' cannot be instantiated directly, use one of its kinds")

        metadata = {
            "short": short,
            "long": long,
            "descr": descr,
            "required": required,
            "storage": storage,
        }
        _sanitize_names(cls, metadata)
        _sanitize_metadata(cls, metadata)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        self._seen = False
        return self

    def __replace__(self, /, **changes):
        """
        Copy of this descriptor with some metadata changed (see copy.replace).

        The copy shares the storage cell unless a new one is given, and is
        sanitized again like a freshly constructed descriptor.
        """
        cls = type(self)
        if unknown := changes.keys() - set(cls.__introspectable__):
            raise TypeError(f"{cls.__typename__} has no field named {sorted(unknown)[0]!r}")

        metadata = {name: getattr(self, name) for name in cls.__introspectable__} | changes
        seen = bool(metadata.pop("seen"))
        if not cls.arity and metadata["required"]:
            raise ValueError(f"{cls.__typename__} cannot be required")
        _sanitize_names(cls, metadata)
        _sanitize_metadata(cls, metadata)

        replaced = super().__new__(cls)
        for name, object in metadata.items():
            setattr(replaced, "_" + name, object)
        replaced._seen = seen
        return replaced

    @property
    def names(self):
        """
        Both spellings as they appear on a command line, e.g. "-v/--verbose".
        """
        return f"-{self._short}/--{self._long}"

    def __accepts__(self, token):
        """
        Whether a value token satisfies this kind's grammar.
        """
        return True

    def __apply__(self, token=Unset):
        raise NotImplementedError


class Flag(Option, arity=0, label="flag", sealed=True):
    """
    Presence-only switch; writes True the first time it is seen.
    """

    def __new__(cls, short, long, descr, storage):
        return super().__new__(cls, short, long, descr, False, storage)

    def __apply__(self, token=Unset):
        self._storage.value = True


class FlagCount(Option, arity=0, label="flag", repeatable=True, sealed=True):
    """
    Counting switch (verbosity style); every occurrence adds one, so
    `-vvv` and `-v --verbose -v` both count three.
    """

    def __new__(cls, short, long, descr, storage):
        return super().__new__(cls, short, long, descr, False, storage)

    def __apply__(self, token=Unset):
        self._storage.value += 1


class Int(Option, label="integer", sealed=True):
    """
    Base-10 integer with an optional leading sign. Digits are ASCII only;
    underscores and surrounding whitespace are rejected, and so are values
    longer than the interpreter converts (sys.get_int_max_str_digits()).
    """

    def __accepts__(self, token):
        return re.fullmatch(r"[+-]?[0-9]+", token) is not None

    def __apply__(self, token=Unset):
        self._storage.value = int(token)


class Float(Option, label="float", sealed=True):
    """
    Decimal float: optional sign, digits with at most one decimal point, and an
    optional exponent ("1.5", "-.25", "3.", "6.02e23", "1E-9"). Values that
    overflow to infinity ("1e999") are refused when applied.
    """

    def __accepts__(self, token):
        return re.fullmatch(r"[+-]?([0-9]+(\.[0-9]*)?|\.[0-9]+)([eE][+-]?[0-9]+)?", token) is not None

    def __apply__(self, token=Unset):
        if not math.isfinite(value := float(token)):
            raise ValueError(f"float value out of range: {token!r}")
        self._storage.value = value


class String(Option, label="string", sealed=True):
    def __apply__(self, token=Unset):
        self._storage.value = token


class Path(Option, label="path", sealed=True):
    def __apply__(self, token=Unset):
        self._storage.value = token


class PathExisting(Option, label="path", sealed=True):
    """
    Like Path, but Parser.validate_paths() checks that the stored path can be
    opened for reading. Nothing is checked while parsing.
    """

    def __apply__(self, token=Unset):
        self._storage.value = token


__all__ = (
    # Abstract base (isinstance checks, dispatch)
    "Option",

    # Concrete kinds
    "Flag",
    "FlagCount",
    "Int",
    "Float",
    "String",
    "Path",
    "PathExisting",
)

# The metaclass is an implementation detail; keep it out of star-imports.
del OptionType
