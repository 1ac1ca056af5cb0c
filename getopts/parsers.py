"""
getopts parser engine: walk an argument vector and dispatch to option actions.

What this module provides
- Mode: NONE (options and non-options may interleave) or POSIXLY_CORRECT
  (the first non-option ends option scanning).
- Parser: holds an ordered tuple of Option references plus the non-option and
  unrecognized-option handlers, and runs the dispatch loop.

Dispatch, one token at a time, left to right
- "--"                 → every remaining token is a non-option; stop.
- "--name[=value]"     → long option; exact names win, unambiguous prefixes
                         are accepted.
- "-abc"               → cluster of short options; a character taking an
                         argument consumes the rest of the cluster (or, when
                         required and the cluster is exhausted, the next token).
- anything else        → non-option (and, in POSIXLY_CORRECT mode, every
                         token after it too).

Faults
- ParseError is raised synchronously and aborts the run; actions executed
  before the error keep their effects.
- Unknown options go to the unrecognized handler, which raises
  "unrecognized option: <token>" unless the caller supplies another one.

Quick start
    from getopts import Option, Parser, ParseError, report, store, store_true, append

    config = types.SimpleNamespace(verbose=False, lhs=100)
    files = []
    parser = Parser([
        Option("-v", "--verbose", action=store_true(config, "verbose"), descr="chatty output"),
        Option("-L", "--lhs", arity="required", action=store(config, "lhs"), metavar="LHS"),
    ], append(files))

    try:
        parser.run(["-v", "--lhs=5", "input.txt"])
    except ParseError as error:
        report(error, help=parser.help("Usage: tool [OPTION...] files..."))
"""
import inspect
import re
import shlex
import sys
import warnings
from collections import deque
from collections.abc import Iterable
from enum import StrEnum

from rich.console import Console
from rich.panel import Panel

from .binders import ignore
from .faults import DuplicateNameWarning, FaultCode, ParseError
from .formatters import format_help, render_help
from .options import Arity, Match, Option
from .utils import IntrospectableType, Unset, coalesce


class Mode(StrEnum):
    NONE = "none"
    POSIXLY_CORRECT = "posixly-correct"


def raise_unrecognized(token, /):
    """
    Default unrecognized-option handler: raise a ParseError for the token.
    """
    raise ParseError(
        "unrecognized option: %s" % token,
        code=FaultCode.UNRECOGNIZED_OPTION,
        token=token,
        hint="check the spelling or see the option list",
    )


def _check_handler(name, handler):
    if not callable(handler):
        raise TypeError(f"parser '{name}' handler must be callable")
    try:
        signature = inspect.signature(handler)
    except (TypeError, ValueError):
        return
    try:
        signature.bind("")
    except TypeError:
        raise TypeError(f"parser '{name}' handler must accept one argument") from None


def _tokenize(argv):
    if argv is Unset:
        return deque(sys.argv[1:])
    if isinstance(argv, str):
        return deque(shlex.split(argv))
    if not isinstance(argv, Iterable):
        raise TypeError("run() argument must be a string or an iterable of strings")
    tokens = deque(argv)
    if not all(isinstance(token, str) for token in tokens):
        raise TypeError("run() argument must be a string or an iterable of strings")
    return tokens


class Parser(metaclass=IntrospectableType):
    """
    Command-line parser over an ordered table of options.

    The parser references the given Option objects (it never copies them) and
    can be run any number of times on different argument vectors. Each run
    only touches the state the options' actions and the handlers mutate.
    """

    __introspectable__ = (
        "options",
        "nonoption",
        "unrecognized",
        "mode",
    )

    def __init__(self, options, /, nonoption=ignore, unrecognized=Unset, *, mode=Mode.NONE):
        """
        Construct a parser.

        Parameters
        - options: Iterable[Option], kept in order.
        - nonoption: callable(str) receiving every non-option token.
        - unrecognized: Unset | callable(str) receiving unknown option tokens
          (defaults to raising ParseError).
        - mode: Mode | "none" | "posixly-correct".

        Warns
        - DuplicateNameWarning when two options declare the same name.
        """
        if not isinstance(options, Iterable):
            raise TypeError("parser 'options' must be an iterable of options")
        options = tuple(options)
        if not all(isinstance(option, Option) for option in options):
            raise TypeError("parser 'options' must be an iterable of options")

        unrecognized = coalesce(unrecognized, raise_unrecognized)
        _check_handler("nonoption", nonoption)
        _check_handler("unrecognized", unrecognized)

        try:
            mode = Mode(mode)
        except ValueError:
            raise ValueError("parser 'mode' must be one of 'none' or 'posixly-correct'") from None

        seen = {}
        for option in options:
            for name in option.names:
                if (first := seen.setdefault(name, option)) is not option:
                    warnings.warn(DuplicateNameWarning(
                        "name %r is declared by %s and %s" % (name, first, option)
                    ), stacklevel=2)

        self._options = options
        self._nonoption = nonoption
        self._unrecognized = unrecognized
        self._mode = mode

    def run(self, argv=Unset, /):
        """
        Parse an argument vector, executing option actions as they are met.

        Parameters
        - argv:
          • Unset: read tokens from sys.argv[1:].
          • str: shell-like string; will be split via shlex.split.
          • Iterable[str]: tokens used verbatim.

        Raises
        - ParseError: on the first unrecognized (default handler), ambiguous,
          disallowed, missing or invalid argument. Nothing is rolled back.
        """
        tokens = _tokenize(argv)
        while tokens:
            token = tokens.popleft()

            if token == "--":
                while tokens:
                    self._nonoption(tokens.popleft())
                break

            if match := re.fullmatch(r"--(?P<name>[^=]*)(=(?P<value>.*))?", token, re.DOTALL):
                self._parse_long(token, match["name"], match["value"], tokens)
            elif match := re.fullmatch(r"-(?P<cluster>.+)", token, re.DOTALL):
                self._parse_short(match["cluster"], tokens)
            elif self._mode is Mode.POSIXLY_CORRECT:
                self._nonoption(token)
                while tokens:
                    self._nonoption(tokens.popleft())
                break
            else:
                self._nonoption(token)

    def _parse_long(self, token, name, value, tokens):
        """
        resolve and execute one "--name[=value]" token.

        resolution
        - the first exact match wins; without one, the first partial match.
        - a second partial match (when resolved by prefix) is ambiguous.
        - any exact match after the resolved option is ambiguous.
        """
        matches = [option.match("--" + name) for option in self._options]
        try:
            index = matches.index(Match.EXACT)
        except ValueError:
            try:
                index = matches.index(Match.PARTIAL)
            except ValueError:
                self._unrecognized(token)
                return
            if Match.PARTIAL in matches[index + 1:]:
                raise self._ambiguous("--" + name, token)
        if Match.EXACT in matches[index + 1:]:
            raise self._ambiguous("--" + name, token)

        option = self._options[index]
        match option.arity:
            case Arity.NONE:
                if value is not None:
                    raise ParseError(
                        "argument not allowed: --%s" % name,
                        code=FaultCode.ARGUMENT_NOT_ALLOWED,
                        token=token,
                        option=str(option),
                        value=value,
                        hint="remove everything from '=' (for example: --%s)" % name,
                    )
                option.execute()
            case Arity.OPTIONAL:
                if value is not None:
                    option.execute(value)
                else:
                    option.execute()
            case Arity.REQUIRED:
                if value is not None:
                    option.execute(value)
                elif tokens:
                    option.execute(tokens.popleft())
                else:
                    raise self._required("--" + name, token, option)

    def _parse_short(self, cluster, tokens):
        """
        resolve and execute a cluster of short options ("-vo", "-Lpath", ...).

        an unknown character hands "-" plus the rest of the cluster to the
        unrecognized handler and ends the cluster.
        """
        for position, character in enumerate(cluster):
            matches = [option.match("-" + character) for option in self._options]
            try:
                index = matches.index(Match.EXACT)
            except ValueError:
                self._unrecognized("-" + cluster[position:])
                return
            if Match.EXACT in matches[index + 1:]:
                raise self._ambiguous("-" + character, "-" + cluster)

            option = self._options[index]
            rest = cluster[position + 1:]
            match option.arity:
                case Arity.NONE:
                    option.execute()
                case Arity.OPTIONAL:
                    # never consumes the next token
                    if rest:
                        option.execute(rest)
                    else:
                        option.execute()
                    return
                case Arity.REQUIRED:
                    if rest:
                        option.execute(rest)
                    elif tokens:
                        option.execute(tokens.popleft())
                    else:
                        raise self._required("-" + character, "-" + cluster, option)
                    return

    def _ambiguous(self, name, token):
        return ParseError(
            "ambiguous option: %s" % name,
            code=FaultCode.AMBIGUOUS_OPTION,
            token=token,
            candidates=tuple(str(option) for option in self._options if option.match(name) is not Match.NONE),
            hint="type more characters of the option name",
        )

    def _required(self, name, token, option):
        return ParseError(
            "argument required: %s" % name,
            code=FaultCode.ARGUMENT_REQUIRED,
            token=token,
            option=str(option),
            hint="add a value (for example: %s %s)" % (name, option.metavar),
        )

    def help(self, header, /):
        """
        Return the plain-text help block (see getopts.formatters.format_help).
        """
        return format_help(header, self._options)

    def print_help(self, header, /, *, console=Unset, colorful=True, fancy=False):
        """
        Print the help block to a rich console (stdout by default).

        fancy wraps the listing in a panel.
        """
        if console is Unset:
            console = Console()
        renderable = render_help(header, self._options, colorful=colorful)
        if fancy:
            renderable = Panel(renderable, title="[ HELP ]", title_align="left")
        console.print(renderable)


__all__ = (
    "Mode",
    "Parser",
    "raise_unrecognized",
)
