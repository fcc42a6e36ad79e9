r"""
Helmsman flags: typed flag values and the flag-set that parses them.

Overview
- Values
  • StringValue, BoolValue, IntValue, UintValue, FloatValue, DurationValue.
  • Each value parses text with set(), exposes the typed payload with get(), prints
    itself with str(), and declares two class-level facts used by help rendering:
      - zero: the text form of the type's zero value ("" / "false" / "0" / "0s").
      - hint: the value-type name shown next to the option ("string", "int", ...).
  • BoolValue is the only boolean value: it may appear without a payload (-v).

- Flag
  • name, usage, value and default (the value's text captured at registration).

- FlagSet
  • Registration helpers: var/string/bool/int/uint/float/duration.
  • Iteration visits every flag in lexicographic order (visit_all), visit() only
    those set on the command line.
  • parse(tokens) consumes flags until the first non-flag (or a "--" terminator);
    the remaining tokens are available as .args.

Syntax accepted by parse()
    -flag  --flag          boolean flags only
    -flag=x  --flag=x
    -flag x  --flag x      non-boolean flags only

Failures raise FlagParseError; -h / -help / --help on a set that does not define
them raise HelpRequested instead.

Help helpers
- unquote_usage(flag): extract the back-quoted value name from a usage string.
- is_zero_value(flag, value): decide whether a default is worth displaying.
"""
import re
from datetime import timedelta

from .faults import FlagParseError, HelpRequested
from .utils import Unset, coalesce

_UNITS = {
    "ns": 1e-3,
    "us": 1,
    "µs": 1,
    "μs": 1,
    "ms": 1e3,
    "s": 1e6,
    "m": 60e6,
    "h": 3600e6,
}

_SEGMENT = re.compile(r"(\d*\.?\d*)(ns|us|µs|μs|ms|s|m|h)")


def parse_duration(text, /):
    """
    Parse a duration such as "300ms", "1.5h" or "2h45m" into a timedelta.
    """
    original = text
    sign = 1
    if text[:1] in ("-", "+"):
        sign = -1 if text[0] == "-" else 1
        text = text[1:]
    if text == "0":
        return timedelta(0)
    if not text:
        raise ValueError(f"invalid duration {original!r}")

    micros = 0.0
    position = 0
    while position < len(text):
        if not (match := _SEGMENT.match(text, position)) or match.group(1) in ("", "."):
            raise ValueError(f"invalid duration {original!r}")
        micros += float(match.group(1)) * _UNITS[match.group(2)]
        position = match.end()
    return timedelta(microseconds=micros * sign)


def _fraction(value, unit):
    whole, rest = divmod(value, unit)
    if not rest:
        return str(whole)
    digits = str(rest).rjust(len(str(unit)) - 1, "0").rstrip("0")
    return f"{whole}.{digits}"


def format_duration(delta, /):
    """
    Print a timedelta the compact way durations are written: 1h2m3.5s, 300ms, 0s.
    """
    micros = (delta.days * 86400 + delta.seconds) * 10**6 + delta.microseconds
    if micros == 0:
        return "0s"

    sign = "-" if micros < 0 else ""
    micros = abs(micros)
    if micros < 1000:
        return f"{sign}{micros}µs"
    if micros < 10**6:
        return f"{sign}{_fraction(micros, 1000)}ms"

    hours, micros = divmod(micros, 3600 * 10**6)
    minutes, micros = divmod(micros, 60 * 10**6)

    text = sign
    if hours:
        text += f"{hours}h"
    if hours or minutes:
        text += f"{minutes}m"
    return f"{text}{_fraction(micros, 10**6)}s"


class Value:
    """
    Base flag value. Subclasses hold a typed payload and convert it from text.
    """
    zero = ""
    hint = "value"
    boolean = False

    def __init__(self, default=Unset, /):
        if isinstance(default, str):
            default = self.convert(default)
        self._value = coalesce(default, self.get_zero())

    @classmethod
    def get_zero(cls):
        return cls.convert(cls.zero)

    @classmethod
    def convert(cls, text):
        return text

    def set(self, text):
        self._value = self.convert(text)

    def get(self):
        return self._value

    def __str__(self):
        return str(self._value)

    def __repr__(self):
        return f"{type(self).__name__}({str(self)!r})"


class StringValue(Value):
    zero = ""
    hint = "string"

    @classmethod
    def convert(cls, text):
        return str(text)


class BoolValue(Value):
    zero = "false"
    hint = ""
    boolean = True

    @classmethod
    def convert(cls, text):
        if text in ("1", "t", "T", "TRUE", "true", "True"):
            return True
        if text in ("0", "f", "F", "FALSE", "false", "False"):
            return False
        raise ValueError("parse error")

    def __str__(self):
        return "true" if self._value else "false"


class IntValue(Value):
    zero = "0"
    hint = "int"

    @classmethod
    def convert(cls, text):
        try:
            return int(text, 0)
        except ValueError:
            raise ValueError("parse error") from None


class UintValue(IntValue):
    hint = "uint"

    def __init__(self, default=Unset, /):
        super().__init__(default)
        if self._value < 0:
            raise ValueError("value out of range")

    @classmethod
    def convert(cls, text):
        if (value := super().convert(text)) < 0:
            raise ValueError("value out of range")
        return value


class FloatValue(Value):
    zero = "0"
    hint = "float"

    @classmethod
    def convert(cls, text):
        try:
            return float(text)
        except ValueError:
            raise ValueError("parse error") from None

    def __str__(self):
        text = repr(float(self._value))
        return text.removesuffix(".0")


class DurationValue(Value):
    zero = "0s"
    hint = "duration"

    @classmethod
    def convert(cls, text):
        if isinstance(text, timedelta):
            return text
        try:
            return parse_duration(text)
        except ValueError:
            raise ValueError("parse error") from None

    def __str__(self):
        return format_duration(self._value)


class Flag:
    """
    A registered flag: its name, usage string, value object and default text.
    """
    __slots__ = ("name", "usage", "value", "default")

    def __init__(self, name, usage, value):
        self.name = name
        self.usage = usage
        self.value = value
        self.default = str(value)

    @property
    def long(self):
        return len(self.name) > 1

    def __repr__(self):
        return f"Flag(name={self.name!r}, default={self.default!r})"


class FlagSet:
    """
    An ordered registry of flags with a parser for command-line tokens.
    """

    def __init__(self, name=""):
        self.name = name
        self._formal = {}
        self._actual = {}
        self._args = []
        self._parsed = False

    # ── registration ────────────────────────────────────────────────────────

    def var(self, value, name, usage=""):
        """
        Register an existing value object under name and return the value.
        """
        if not isinstance(value, Value):
            raise TypeError(f"flag {name!r} value must be a flag value")
        if not isinstance(name, str) or not (name := name.strip()):
            raise ValueError("flag name cannot be empty")
        if name.startswith("-") or "=" in name:
            raise ValueError(f"flag {name!r} begins with - or contains =")
        if name in self._formal:
            raise ValueError(f"flag redefined: {name}" + (f" (in flag-set {self.name!r})" if self.name else ""))
        self._formal[name] = Flag(name, usage, value)
        return value

    def string(self, name, default="", usage=""):
        return self.var(StringValue(default), name, usage)

    def bool(self, name, default=False, usage=""):
        return self.var(BoolValue(default), name, usage)

    def int(self, name, default=0, usage=""):
        return self.var(IntValue(default), name, usage)

    def uint(self, name, default=0, usage=""):
        return self.var(UintValue(default), name, usage)

    def float(self, name, default=0.0, usage=""):
        return self.var(FloatValue(default), name, usage)

    def duration(self, name, default=timedelta(0), usage=""):
        return self.var(DurationValue(default), name, usage)

    # ── introspection ───────────────────────────────────────────────────────

    def lookup(self, name):
        return self._formal.get(name)

    def __contains__(self, name):
        return name in self._formal

    def __iter__(self):
        return iter([self._formal[name] for name in sorted(self._formal)])

    def __len__(self):
        return len(self._formal)

    def visit_all(self, visitor):
        """
        Call visitor(flag) for every flag, in lexicographic order.
        """
        for flag in self:
            visitor(flag)

    def visit(self, visitor):
        """
        Call visitor(flag) for every flag that has been set, in lexicographic order.
        """
        for name in sorted(self._actual):
            visitor(self._actual[name])

    def set(self, name, text):
        if (flag := self._formal.get(name)) is None:
            raise KeyError(f"no such flag -{name}")
        flag.value.set(text)
        self._actual[name] = flag

    @property
    def args(self):
        return list(self._args)

    @property
    def parsed(self):
        return self._parsed

    # ── parsing ─────────────────────────────────────────────────────────────

    def _parse_one(self):
        token = self._args[0]
        if len(token) < 2 or token[0] != "-":
            return False

        minuses = 1
        if token[1] == "-":
            minuses += 1
            if len(token) == 2:  # "--" terminates the flags
                del self._args[0]
                return False

        name = token[minuses:]
        if not name or name[0] in ("-", "="):
            raise FlagParseError(f"bad flag syntax: {token}", flag=token, hint="flags look like -name or --name=value")

        del self._args[0]
        name, assigned, text = name.partition("=")

        if (flag := self._formal.get(name)) is None:
            if name in ("help", "h"):
                raise HelpRequested("flag: help requested", flag=name)
            raise FlagParseError(
                f"flag provided but not defined: -{name}",
                flag=name,
                hint="run with --help to list the available options",
            )

        if flag.value.boolean:
            try:
                flag.value.set(text if assigned else "true")
            except ValueError as error:
                raise FlagParseError(f"invalid boolean value {text!r} for -{name}: {error}", flag=name) from None
        else:
            if not assigned:
                if not self._args:
                    raise FlagParseError(f"flag needs an argument: -{name}", flag=name)
                text = self._args.pop(0)
            try:
                flag.value.set(text)
            except ValueError as error:
                raise FlagParseError(f"invalid value {text!r} for flag -{name}: {error}", flag=name) from None

        self._actual[name] = flag
        return True

    def parse(self, tokens):
        """
        Parse flags from tokens; the first non-flag token stops parsing.

        Raises
        - FlagParseError on malformed or unknown flags and bad values.
        - HelpRequested when -h/-help/--help is given but not defined.
        """
        self._parsed = True
        self._args = list(tokens)
        while self._args and self._parse_one():
            pass
        return self.args


def unquote_usage(flag, /):
    """
    Return (name, usage) for help output.

    The first back-quoted word of the usage names the value and loses its quotes:
    "load `file` at startup" -> ("file", "load file at startup"). Without one, the
    value type's hint is used ("" for booleans).
    """
    usage = flag.usage
    if (start := usage.find("`")) != -1 and (end := usage.find("`", start + 1)) != -1:
        name = usage[start + 1:end]
        return name, usage[:start] + name + usage[end + 1:]
    return type(flag.value).hint, usage


def is_zero_value(flag, value, /):
    """
    Guess whether value is the zero value for the flag's type.

    Besides the type's own zero text, "false", "" and "0" always count as zero.
    """
    if value == type(flag.value).zero:
        return True
    return value in ("false", "", "0")


__all__ = (
    "Value",
    "StringValue",
    "BoolValue",
    "IntValue",
    "UintValue",
    "FloatValue",
    "DurationValue",
    "Flag",
    "FlagSet",
    "parse_duration",
    "format_duration",
    "unquote_usage",
    "is_zero_value",
)
