"""
Calculator example: combine two integers with an operator.

    $ python examples/calc.py --op=add -L 5 --rhs=7
    12
    $ python examples/calc.py --op mul --lhs=6
    1200
"""
import sys
import types

from rich.console import Console

from getopts import FaultCode, Option, ParseError, Parser, ignore, report, store, store_true

HEADER = "Options"

OPERATORS = {
    "add": lambda lhs, rhs: lhs + rhs,
    "sub": lambda lhs, rhs: lhs - rhs,
    "mul": lambda lhs, rhs: lhs * rhs,
    "div": lambda lhs, rhs: lhs // rhs,
}


def main(argv=None, /, *, console=None):
    config = types.SimpleNamespace(help=False, op="", lhs=100, rhs=200)
    console = console or Console()

    parser = Parser([
        Option("-h", "--help", action=store_true(config, "help"), descr="show this help"),
        Option("--op", arity="required", action=store(config, "op"), metavar="OP",
               descr="operation to apply\none of: add, sub, mul, div"),
        Option("-L", "--lhs", arity="required", action=store(config, "lhs"), metavar="LHS",
               descr="left operand (default: 100)"),
        Option("-R", "--rhs", arity="required", action=store(config, "rhs"), metavar="RHS",
               descr="right operand (default: 200)"),
    ], ignore)

    try:
        parser.run(sys.argv[1:] if argv is None else argv)
    except ParseError as error:
        report(error, help=parser.help(HEADER))
        return 1

    if config.help or config.op not in OPERATORS:
        console.print(parser.help(HEADER), markup=False, highlight=False)
        return 0 if config.help else 1

    if config.op == "div" and config.rhs == 0:
        report(ParseError(
            "invalid value: %s" % config.rhs,
            code=FaultCode.INVALID_VALUE,
            value=str(config.rhs),
            hint="div needs a non-zero right operand (-R)",
        ))
        return 1

    console.print(OPERATORS[config.op](config.lhs, config.rhs))
    return 0


if __name__ == "__main__":
    sys.exit(main())
