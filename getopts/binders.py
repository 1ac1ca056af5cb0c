"""
getopts value binders.

A binder is the action attached to an option: a callable with two forms.
- binder()      → the zero-argument form, used by options without an argument
                  and by optional-argument options given without text.
- binder(text)  → the one-argument form, used with the raw argument text.

Binders mutate caller-owned state. Scalar binders write ``target.name`` (or
``target[name]`` when the target is a mutable mapping); collection binders
append to a mutable sequence in place.

Binders whose zero-argument form has no meaning (Append) declare a required
parameter, so Option(...) rejects them at construction time for arities that
need that form.

Quick example:
    >>> config = types.SimpleNamespace(lhs=100, verbose=False, output="")
    >>> store(config, "lhs")("5")          # config.lhs == 5 (int inferred from 100)
    >>> store_true(config, "verbose")()    # config.verbose is True
    >>> store_or(config, "output", "stdout")()
    >>> config.output
    'stdout'
"""
import builtins
import re
from collections.abc import MutableMapping, MutableSequence

from .faults import FaultCode, ParseError
from .utils import IntrospectableType, Unset

# plain ASCII numerals only: no digit-group underscores, no other scripts' digits
_NUMERALS = {
    int: r"\s*[+-]?\d+\s*",
    float: r"\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?\s*",
}


def from_string(type, text, /):
    """
    Convert argument text into a value of the given type.

    Rules
    - str: the text is used verbatim (no stripping).
    - bool: "0" or "1" (surrounding whitespace tolerated).
    - int, float: an ASCII decimal numeral ("1_000", "５" and "inf" are
      rejected), surrounding whitespace tolerated.
    - anything else: type(text).

    Raises
    - ParseError(FaultCode.INVALID_VALUE) when the conversion fails.
    """
    if not isinstance(text, str):
        raise TypeError("from_string() second argument must be a string")
    if type is str:
        return text
    try:
        if type is bool:
            match text.strip():
                case "0":
                    return False
                case "1":
                    return True
            raise ValueError(text)
        if (pattern := _NUMERALS.get(type)) and not re.fullmatch(pattern, text, re.ASCII):
            raise ValueError(text)
        return type(text)
    except (ValueError, TypeError, ArithmeticError):
        raise ParseError(
            "invalid value: %s" % text,
            code=FaultCode.INVALID_VALUE,
            value=text,
            type=getattr(type, "__name__", repr(type)),
            hint="expected a value of type %r" % getattr(type, "__name__", type),
        ) from None


def _load(target, name):
    if isinstance(target, MutableMapping):
        return target.get(name)
    return getattr(target, name, None)


def _store(target, name, value):
    if isinstance(target, MutableMapping):
        target[name] = value
    else:
        setattr(target, name, value)


def _check_name(cls, name):
    if not isinstance(name, str):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    elif not name:
        raise ValueError(f"{cls.__typename__} 'name' cannot be empty")


def _check_sequence(cls, sequence):
    if not isinstance(sequence, MutableSequence):
        raise TypeError(f"{cls.__typename__} 'sequence' must be a mutable sequence")


def _check_type(cls, type):
    if not callable(type):
        raise TypeError(f"{cls.__typename__} 'type' must be callable")


class Binder(metaclass=IntrospectableType):
    """
    Base class for the library binders.

    Subclasses implement __call__ with a positional-only text parameter; the
    default value Unset marks a zero-argument form that is supported.
    """


class Ignore(Binder):
    """
    Binder that does nothing with either form (e.g. non-options to discard).
    """

    def __call__(self, text=Unset, /):
        return None


class StoreConst(Binder):
    """
    Assign a fixed value on every invocation, regardless of the argument text.
    """
    __introspectable__ = ("target", "name", "value")

    def __init__(self, target, name, value, /):
        _check_name(type(self), name)
        self._target = target
        self._name = name
        self._value = value

    def __call__(self, text=Unset, /):
        _store(self._target, self._name, self._value)


class AppendConst(Binder):
    """
    Append a fixed value on every invocation, regardless of the argument text.
    """
    __introspectable__ = ("sequence", "value")

    def __init__(self, sequence, value, /):
        _check_sequence(type(self), sequence)
        self._sequence = sequence
        self._value = value

    def __call__(self, text=Unset, /):
        self._sequence.append(self._value)


class Store(Binder):
    """
    Convert the argument text and assign it.

    The zero-argument form is a no-op placeholder. The value type defaults to
    the type of the target's current value (str when it is None).
    """
    __introspectable__ = ("target", "name", "type")

    def __init__(self, target, name, /, type=Unset):
        _check_name(builtins.type(self), name)
        if type is Unset:
            current = _load(target, name)
            type = str if current is None else builtins.type(current)
        _check_type(builtins.type(self), type)
        self._target = target
        self._name = name
        self._type = type

    def __call__(self, text=Unset, /):
        if text is Unset:
            return
        _store(self._target, self._name, from_string(self._type, text))


class StoreOr(Binder):
    """
    Assign a default when given no text; otherwise convert the text and assign it.
    """
    __introspectable__ = ("target", "name", "default", "type")

    def __init__(self, target, name, default, /, type=Unset):
        _check_name(builtins.type(self), name)
        if type is Unset:
            current = _load(target, name)
            sample = default if current is None else current
            type = str if sample is None else builtins.type(sample)
        _check_type(builtins.type(self), type)
        self._target = target
        self._name = name
        self._default = default
        self._type = type

    def __call__(self, text=Unset, /):
        if text is Unset:
            _store(self._target, self._name, self._default)
        else:
            _store(self._target, self._name, from_string(self._type, text))


class Append(Binder):
    """
    Convert the argument text and append it. There is no zero-argument form.
    """
    __introspectable__ = ("sequence", "type")

    def __init__(self, sequence, /, type=str):
        _check_sequence(builtins.type(self), sequence)
        _check_type(builtins.type(self), type)
        self._sequence = sequence
        self._type = type

    def __call__(self, text, /):
        self._sequence.append(from_string(self._type, text))


class AppendOr(Binder):
    """
    Append a default when given no text; otherwise convert the text and append it.
    """
    __introspectable__ = ("sequence", "default", "type")

    def __init__(self, sequence, default, /, type=str):
        _check_sequence(builtins.type(self), sequence)
        _check_type(builtins.type(self), type)
        self._sequence = sequence
        self._default = default
        self._type = type

    def __call__(self, text=Unset, /):
        if text is Unset:
            self._sequence.append(self._default)
        else:
            self._sequence.append(from_string(self._type, text))


ignore = Ignore()


def store_const(target, name, value, /):
    """
    Binder assigning ``value`` to ``target.name`` whenever the option is given.
    """
    return StoreConst(target, name, value)


def store_true(target, name, /):
    return StoreConst(target, name, True)


def store_false(target, name, /):
    return StoreConst(target, name, False)


def append_const(sequence, value, /):
    return AppendConst(sequence, value)


def store(target, name, /, type=Unset):
    """
    Binder converting the argument text and assigning it to ``target.name``.

    The type defaults to the type of the current value; pass ``type=`` when
    the current value is None or a different converter is wanted.
    """
    return Store(target, name, type=type)


def store_or(target, name, default, /, type=Unset):
    """
    Like store(), but the zero-argument form assigns ``default``.
    """
    return StoreOr(target, name, default, type=type)


def append(sequence, /, type=str):
    """
    Binder converting the argument text and appending it to ``sequence``.
    """
    return Append(sequence, type=type)


def append_or(sequence, default, /, type=str):
    """
    Like append(), but the zero-argument form appends ``default``.
    """
    return AppendOr(sequence, default, type=type)


__all__ = (
    # Conversion
    "from_string",

    # Classes
    "Binder",
    "Ignore",
    "StoreConst",
    "AppendConst",
    "Store",
    "StoreOr",
    "Append",
    "AppendOr",

    # Factories
    "ignore",
    "store_const",
    "store_true",
    "store_false",
    "append_const",
    "store",
    "store_or",
    "append",
    "append_or",
)
