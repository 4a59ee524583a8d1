import sys

from rich.console import Console

from plainopts import *

console = Console(stderr=True)


def main(argv=None):
    input = Cell()
    verbosity = Cell(0)

    parser = Parser(
        String("i", "input-file", "input file", True, input),
        FlagCount("v", "verbose", "verbose logging", verbosity),
    )

    if not parser.parse(sys.argv if argv is None else argv):
        # Custom preamble, then the generated options listing
        console.print("\nUsage: main.py [-v] -i INPUT\n", markup=False, highlight=False)
        parser.print_usage()
        return 1

    print("Input file = %s" % input.value)
    print("Verbosity = %d" % verbosity.value)
    return 0


if __name__ == '__main__':
    sys.exit(main())
