"""
Compiler-style example: flags, optional arguments, repeated options and files.

    $ python examples/ic.py -vo -L lib -Lusr/lib main.c util.c
    verbose=True
    version=False
    output=stdout
    input=
    libdirs=['lib', 'usr/lib']
    files=['main.c', 'util.c']
"""
import sys
import types

from rich.console import Console

from getopts import Option, ParseError, Parser, append, report, store_or, store_true

HEADER = "Usage: ic [OPTION...] files..."


def main(argv=None, /, *, console=None):
    config = types.SimpleNamespace(verbose=False, version=False, output="", input="", libdirs=[], files=[])
    console = console or Console()

    parser = Parser([
        Option("-v", "--verbose", action=store_true(config, "verbose"), descr="chatty output on stderr"),
        Option("-V", "-?", "--version", action=store_true(config, "version"), descr="show version number"),
        Option("-o", "--output", arity="optional", action=store_or(config, "output", "stdout"), metavar="FILE",
               descr="output FILE"),
        Option("-c", arity="optional", action=store_or(config, "input", "stdin"), metavar="FILE",
               descr="input FILE"),
        Option("-L", "--libdir", arity="required", action=append(config.libdirs), metavar="DIR",
               descr="library directory"),
    ], append(config.files))

    try:
        parser.run(sys.argv[1:] if argv is None else argv)
    except ParseError as error:
        report(error, help=parser.help(HEADER))
        return 1

    for name in ("verbose", "version", "output", "input", "libdirs", "files"):
        console.print("%s=%s" % (name, getattr(config, name)), markup=False, highlight=False)
    return 0


if __name__ == "__main__":
    sys.exit(main())
