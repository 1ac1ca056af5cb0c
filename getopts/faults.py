"""
getopts faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing issue.
- ParseError: the single error type raised by the parser and the binders. It
  carries a message plus read-only context and knows how to render itself
  with rich.
- DuplicateNameWarning: soft fault emitted when an option table declares the
  same name twice (the run still raises “ambiguous option” if it is used).
- report(): print a fault (and optionally a help block) to the error console.

Integration
- The parser raises ParseError synchronously; nothing is swallowed.
- Callers catch ParseError at the top level and decide how to present it,
  typically with report(error, help=parser.help(header)) followed by an exit.
"""
import os.path
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, coalesce

_console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the parser (stable identifiers).

    grouping
    - errors (111xx): UNRECOGNIZED_OPTION, ARGUMENT_NOT_ALLOWED, AMBIGUOUS_OPTION,
      ARGUMENT_REQUIRED, INVALID_VALUE
    - warnings (121xx): DUPLICATE_NAME
    """
    # --- option errors (111xx) ---
    UNRECOGNIZED_OPTION  = 11112
    ARGUMENT_NOT_ALLOWED = 11113
    AMBIGUOUS_OPTION     = 11115
    ARGUMENT_REQUIRED    = 11117
    INVALID_VALUE        = 11124

    # --- warnings (121xx) ---
    DUPLICATE_NAME       = 12115

    @property
    def title(self):
        """
        short lowercase title shown in rendered headers (e.g. "argument required").
        """
        return self.name.lower().replace("_", " ")

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _palette(defaults, /):
    return defaultdict(str, defaults | getattr(__import__("__main__"), "__styles__", {}))


def _prog():
    return getattr(__import__("__main__"), "__prog__", os.path.basename(sys.argv[0]) or "getopts")


class ParseError(Exception):
    """
    Structured parse error.

    Attributes
    - message: human-readable text, also returned by str(error).
    - code: FaultCode identifying the kind of failure.
    - options: read-only mapping with context (token, option, value, hint, ...);
      parser-raised context values are strings, so errors pickle.

    Rendering
    - __rich__ produces "[ prog — code | title ]", the message and a hint line.
      The options colorful (default True) and fancy (default False) shape it.
    """

    def __init__(self, message, /, code, **options):
        if not isinstance(message, str):
            raise TypeError("ParseError() message must be a string")
        if not isinstance(code, FaultCode):
            raise TypeError("ParseError() code must be a fault-code")
        super().__init__(message)
        self.message = message
        self.code = code
        self.options = MappingProxyType(options)

    def __str__(self):
        return self.message

    def __reduce__(self):
        return _rebuild, (type(self), self.message, self.code, dict(self.options))

    def __rich__(self):
        colorful = self.options.get("colorful", True)
        styles = _palette({
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        })

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            return Text(str(fragment), styles[style] if colorful else "")

        header = Text.assemble(
            "[ ",
            text(_prog(), "prog-name"),
            " — ",
            text(self.code.normalize(), "code"),
            " | ",
            text(self.code.title.title(), "error-title"),
            " ]"
        )
        message = text(self.message, "error-message")
        renders = [message]
        if hint := self.options.get("hint"):
            renders.append(Text.assemble(text(" → ", "hint-arrow"), text(hint, "hint")))

        if self.options.get("fancy", False):
            return Panel(Group(*renders), title=header, title_align="left")
        return Group(header, *renders)

    def __replace__(self, **overrides):
        return type(self)(self.message, self.code, **{**self.options, **overrides})


def _rebuild(cls, message, code, options):
    return cls(message, code, **options)


class DuplicateNameWarning(UserWarning):
    """
    Emitted when two options of one parser declare the same short or long name.

    The table still works for every other name; using the duplicated name
    raises ParseError with FaultCode.AMBIGUOUS_OPTION.
    """
    code = FaultCode.DUPLICATE_NAME


def report(error, /, *, help=Unset, console=Unset, colorful=True, fancy=False):
    """
    print a fault to the error console, followed by an optional help block.

    parameters
    - error: ParseError to render.
    - help: Unset | str | rich renderable shown after a blank line.
    - console: Unset | rich Console (defaults to the module stderr console).
    - colorful/fancy: presentation flags forwarded to the fault renderer.

    this never exits; the caller decides the exit status.
    """
    if not isinstance(error, ParseError):
        raise TypeError("report() argument must be a parse error")
    target = coalesce(console, _console)
    target.print(error.__replace__(colorful=colorful, fancy=fancy))
    if help is Unset:
        return
    target.print()
    if isinstance(help, str):
        # plain help contains brackets such as "-o[FILE]" that must not be read as markup
        target.print(help, markup=False, highlight=False)
    else:
        target.print(help)


__all__ = (
    "FaultCode",
    "ParseError",
    "DuplicateNameWarning",
    "report",
)
