"""
Caller-owned storage for parsed option values.

A Cell is a small mutable box. The host application creates one per option,
puts its default in it, and hands it to an option factory. The parser only
ever writes `cell.value`; it never creates, replaces, or drops a cell, so the
defaults of options that were not given on the command line survive parsing.

Example
    >>> verbosity = Cell(0)
    >>> parser = Parser(FlagCount("v", "verbose", "verbose logging", verbosity))
    >>> parser.parse(["prog", "-vv"])
    True
    >>> verbosity.value
    2
"""
from rich.text import Text


class Cell[_T]:
    """
    Mutable, caller-owned holder for a single value.

    Notes
    - A cell is always truthy as an object; test `cell.value` for the payload.
    - Equality is identity: two cells holding equal values are still distinct
      storage locations.
    """

    __slots__ = ("value",)

    def __init__(self, value=None, /):
        self.value = value

    def get(self):
        return self.value

    def set(self, value, /):
        self.value = value

    def __repr__(self):
        return f"cell({self.value!r})"

    def __rich__(self):
        return Text.assemble(("cell", "dim"), "(", repr(self.value), ")")

    def __rich_repr__(self):
        yield self.value


__all__ = (
    "Cell",
)
