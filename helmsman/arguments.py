r"""
Helmsman positional argument specifications.

Overview
- Argument: a named positional slot of a command.
  • name: identifier used for lookups and help (must match ^[a-zA-Z][\w-]*$).
  • show_name: display name used in diagnostics (defaults to name).
  • descr: short description shown in the "Arguments" help section.
  • required: binding fails when the input does not reach this position.
  • array: greedy, binds every remaining token as a list (must be the last argument).
  • index: 0-based position, assigned when the argument is added to a command.
  • value: None until bound, then a string (or a list of strings for arrays).

- Accessors on bound values: as_str(), as_int(), as_list(), has_value, is_empty.

Introspection & representation
- ArgumentType metaclass provides stable __repr__/__rich_repr__ and exposes the
  fields listed in __introspectable__ through read-only properties.

Quick example:
    >>> src = Argument("src", "the source file", required=True)
    >>> files = Argument("files", "more files", array=True)
"""
import functools
import operator
import re

from rich.text import Text

from .utils import *


class ArgumentType(type):
    """
    Metaclass that exposes argument fields as read-only, introspectable properties.

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens)
      and used in messages.
    - __displayable__ (if set) narrows which properties are shown by __rich_repr__;
      otherwise __introspectable__ is used.
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
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
            """
            Return a concise, stable representation with key metadata.

            Example
            - argument(name='src', required=True, array=False, index=0, value=None)
            """
            return f"{type(self).__typename__}({', '.join(map(functools.partial(operator.mod, '%s=%r'), self.__rich_repr__()))})"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


class Argument(metaclass=ArgumentType):
    """
    Positional argument specification of a command.

    Properties
    - The names listed in __introspectable__ are exposed as read-only attributes
      on instances, mirroring the sanitized metadata values.
    """

    __introspectable__ = (
        "name",
        "show_name",
        "descr",
        "required",
        "array",
        "index",
        "value",
    )

    __displayable__ = (
        "name",
        "required",
        "array",
        "index",
        "value",
    )

    def __init__(
            self,
            name,
            /,
            descr="",
            required=False,
            array=False,
            *,
            show_name=Unset,
    ):
        """
        Construct an argument spec.

        Parameters
        - name: str
          Identifier starting with a letter, followed by letters, digits, '_' or '-'.
        - descr: str | Text
          Description shown in help.
        - required: bool
          Whether binding must reach this position.
        - array: bool
          Whether this argument consumes all remaining tokens.
        - show_name: str | Unset
          Display name for diagnostics, defaults to name.

        Raises
        - TypeError: when name/descr/show_name have the wrong type.
        - ValueError: when name is not a valid argument name.
        """
        if not isinstance(name, str):
            raise TypeError(f"{type(self).__typename__} 'name' must be a string")
        elif not re.fullmatch(r"[a-zA-Z][\w-]*", name := name.strip()):
            raise ValueError(f"{type(self).__typename__} name {name!r} is invalid, must match ^[a-zA-Z][\\w-]*$")

        if not isinstance(descr, str | Text):
            raise TypeError(f"{type(self).__typename__} 'descr' must be a string")
        if not isinstance(show_name, str | Unset):
            raise TypeError(f"{type(self).__typename__} 'show_name' must be a string")

        self._name = name
        self._show_name = coalesce(show_name, name).strip() or name
        self._descr = descr.strip() if isinstance(descr, str) else descr
        self._required = bool(required)
        self._array = bool(array)
        self._index = 0
        self._value = None

    @property
    def position(self):
        """
        1-based position of the argument on the command line.
        """
        return self._index + 1

    @property
    def has_value(self):
        return self._value is not None

    @property
    def is_empty(self):
        return not self._value

    def as_str(self, default="", /):
        """
        Return the bound value as a string; arrays are joined with commas.
        """
        if self._value is None:
            return default
        if isinstance(self._value, list):
            return ",".join(self._value)
        return self._value

    def as_int(self, default=0, /):
        """
        Return the bound value converted to int, or default when unbound or not numeric.
        """
        if not isinstance(self._value, str):
            return default
        try:
            return int(self._value)
        except ValueError:
            return default

    def as_list(self):
        """
        Return the bound value as a list of strings (empty when unbound).
        """
        if self._value is None:
            return []
        if isinstance(self._value, list):
            return list(self._value)
        return [self._value]


__all__ = (
    "Argument",
)
