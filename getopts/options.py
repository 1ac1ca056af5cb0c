r"""
getopts option declarations.

Overview
- Arity: whether an option takes no argument, an optional argument or a
  required argument.
- Match: result of comparing one command-line token against an option
  (none, exact, or partial for long-name prefixes).
- HelpLine: the three help columns of an option (short names, long names,
  description).
- Option: one declared option. Names, arity, bound action and help metadata,
  plus name matching, execution and help-line rendering.

Names
- short: "-c" where c is a single character other than "-" and whitespace.
- long: "--name" where name has no "=" and no whitespace.
- declaration order is kept; it drives help output.

Actions
- The action is any callable. Its signature is checked against the arity:
  • Arity.NONE     → must be callable as action()
  • Arity.OPTIONAL → must be callable as action() and action(text)
  • Arity.REQUIRED → must be callable as action(text)
  The binders in getopts.binders follow this contract.

Quick example:
    >>> config = types.SimpleNamespace(lhs=100, verbose=False)
    >>> Option("-L", "--lhs", arity="required", action=store(config, "lhs"), metavar="LHS")
    >>> Option("-v", "--verbose", action=store_true(config, "verbose"), descr="chatty output")
"""
import inspect
import re
from enum import StrEnum
from typing import NamedTuple

from .binders import ignore
from .utils import IntrospectableType, Unset, coalesce


class Arity(StrEnum):
    NONE = "none"
    OPTIONAL = "optional"
    REQUIRED = "required"


class Match(StrEnum):
    NONE = "none"
    EXACT = "exact"
    PARTIAL = "partial"


class HelpLine(NamedTuple):
    shorts: str
    longs: str
    descr: str


def decorations(arity, metavar, /):
    """
    Help suffixes appended to short and long names for an arity.

    - Arity.NONE     → ("", "")
    - Arity.OPTIONAL → ("[FILE]", "[=FILE]")
    - Arity.REQUIRED → (" FILE", "=FILE")
    """
    match Arity(arity):
        case Arity.OPTIONAL:
            return "[%s]" % metavar, "[=%s]" % metavar
        case Arity.REQUIRED:
            return " %s" % metavar, "=%s" % metavar
        case _:
            return "", ""


def _sanitize_names(cls, metadata, /):
    """
    Internal: validate declared names and split them into shorts and longs.

    Raises
    - TypeError: when no name is given or a name is not a string.
    - ValueError: when a name is malformed or duplicated.
    """
    if not metadata["names"]:
        raise TypeError(f"{cls.__typename__} must specify at least one name")

    shorts = []
    longs = []
    for name in metadata["names"]:
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} names must be strings")
        if match := re.fullmatch(r"--(?P<long>[^=\s]+)", name):
            names = longs
            name = match["long"]
        elif match := re.fullmatch(r"-(?P<short>[^-\s])", name):
            names = shorts
            name = match["short"]
        else:
            raise ValueError(f"{cls.__typename__} names must be '-c' or '--name' (got {name!r})")
        if name in names:
            raise ValueError(f"{cls.__typename__} names cannot contain duplicates")
        names.append(name)

    metadata["names"] = tuple(metadata["names"])
    metadata["shorts"] = tuple(shorts)
    metadata["longs"] = tuple(longs)


def _sanitize_arity(cls, metadata, /):
    """
    Internal: normalize the arity and the metavar that goes with it.

    - arity accepts an Arity member or its string value.
    - metavar is forbidden for Arity.NONE; otherwise it defaults to the first
      long name upper-cased (or "ARG" when there is no long name).
    """
    try:
        metadata["arity"] = arity = Arity(metadata["arity"])
    except ValueError:
        raise ValueError(f"{cls.__typename__} 'arity' must be one of 'none', 'optional', or 'required'") from None

    if not isinstance(metavar := metadata["metavar"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'metavar' must be a string")
    elif isinstance(metavar, str) and not (metavar := metavar.strip()):
        raise ValueError(f"{cls.__typename__} 'metavar' cannot be empty")

    if arity is Arity.NONE:
        if metavar:
            raise TypeError(f"{cls.__typename__} without argument cannot have a 'metavar'")
        metadata["metavar"] = ""
    else:
        metadata["metavar"] = coalesce(metavar, metadata["longs"][0].upper() if metadata["longs"] else "ARG")

    if not isinstance(metadata["descr"], str):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")


def _sanitize_action(cls, metadata, /):
    """
    Internal: check that the action can be called with the forms its arity needs.

    Callables without an introspectable signature (some builtins) are trusted.
    """
    if not callable(action := metadata["action"]):
        raise TypeError(f"{cls.__typename__} 'action' must be callable")

    try:
        signature = inspect.signature(action)
    except (TypeError, ValueError):
        return

    arity = metadata["arity"]
    if arity is not Arity.REQUIRED:
        try:
            signature.bind()
        except TypeError:
            raise TypeError(f"{cls.__typename__} with {arity} argument needs an action callable without arguments") from None
    if arity is not Arity.NONE:
        try:
            signature.bind("")
        except TypeError:
            raise TypeError(f"{cls.__typename__} with {arity} argument needs an action callable with one argument") from None


class Option(metaclass=IntrospectableType):
    """
    One declared command-line option.

    Option keeps its short names, long names, arity, action and help metadata.
    Instances are immutable after construction; the names listed in
    __introspectable__ are exposed as read-only properties.

    Matching
    - match("-c")      → Match.EXACT if c is a short name, else Match.NONE.
    - match("--name")  → Match.EXACT if name is a long name; Match.PARTIAL if
      it is a non-empty strict prefix of a long name; else Match.NONE.

    Execution
    - execute()      → zero-argument form (not for Arity.REQUIRED).
    - execute(text)  → one-argument form (not for Arity.NONE).
    """

    __introspectable__ = (
        "names",
        "shorts",
        "longs",
        "arity",
        "action",
        "metavar",
        "descr",
    )
    __displayable__ = (
        "names",
        "arity",
        "metavar",
        "descr",
    )

    def __init__(self, *names, arity=Arity.NONE, action=ignore, metavar=Unset, descr=""):
        """
        Construct an Option with the provided metadata.

        Parameters
        - names: one or more str ("-c" short names, "--name" long names).
        - arity: Arity | "none" | "optional" | "required".
        - action: callable invoked by execute(); see getopts.binders.
        - metavar: Unset | str, the argument placeholder shown in help.
        - descr: str, the description shown in help (may span several lines).

        Raises
        - TypeError/ValueError for malformed declarations.
        """
        metadata = {
            "names": names,
            "arity": arity,
            "action": action,
            "metavar": metavar,
            "descr": descr,
        }
        _sanitize_names(type(self), metadata)
        _sanitize_arity(type(self), metadata)
        _sanitize_action(type(self), metadata)

        for name, object in metadata.items():
            setattr(self, "_" + name, object)

    def match(self, token, /):
        """
        Compare a "-c" or "--name" token against this option's names.

        An exact long name wins over a prefix of another long name.
        """
        if not isinstance(token, str):
            raise TypeError("match() argument must be a string")
        if token.startswith("--"):
            name = token[2:]
            result = Match.NONE
            for long in self._longs:
                if name == long:
                    return Match.EXACT
                if name and len(name) < len(long) and long.startswith(name):
                    result = Match.PARTIAL
            return result
        if len(token) == 2 and token.startswith("-"):
            return Match.EXACT if token[1] in self._shorts else Match.NONE
        raise ValueError("match() argument must be '-c' or '--name' (got %r)" % token)

    def execute(self, text=Unset, /):
        """
        Run the bound action: action() without text, action(text) with it.
        """
        if text is Unset:
            if self._arity is Arity.REQUIRED:
                raise TypeError(f"{self} requires an argument")
            return self._action()
        if not isinstance(text, str):
            raise TypeError("execute() argument must be a string")
        if self._arity is Arity.NONE:
            raise TypeError(f"{self} does not take an argument")
        return self._action(text)

    def render_help(self):
        """
        Build the three help columns.

        - shorts: "-h", "-L LHS" (required), "-o[FILE]" (optional), comma-joined
        - longs:  "--help", "--lhs=LHS", "--output[=FILE]", comma-joined
        - descr:  the description as declared
        """
        short, long = decorations(self._arity, self._metavar)
        return HelpLine(
            ",".join("-" + name + short for name in self._shorts),
            ",".join("--" + name + long for name in self._longs),
            self._descr,
        )

    def __str__(self):
        return "option %r" % "/".join(self._names)


__all__ = (
    "Arity",
    "Match",
    "HelpLine",
    "Option",
)
