"""
Helmsman faults (errors) and rendering.

Scope
- FaultCode: stable numeric identifiers for every user-facing failure, grouped by domain.
- CommandException: base type carrying a message plus read-only options (code, title,
  hint and context) that knows how to render itself through rich.
- Concrete faults raised while parsing flags and binding positional arguments.
- exit_with_error()/terminate(): the process-level exits used by standalone commands.

Integration
- FlagSet.parse raises FlagParseError (or HelpRequested) on malformed input.
- Command.collect_named_args raises MissingArgumentError / TooManyArgumentsError.
- Command.run turns a FlagParseError into a printed fault and exit status ERR.
"""
import copy
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Group
from rich.text import Text

from .styles import console
from .utils import Unset

OK = 0
ERR = 2


class FaultCode(IntEnum):
    """
    canonical fault codes used across the cli (stable identifiers).

    grouping (by high-level domain)
    - flags (111xx)
      • FLAG_PARSE, HELP_REQUESTED
    - positional arguments (112xx)
      • MISSING_ARGUMENT, TOO_MANY_ARGUMENTS

    the host application can provide a __codes__ mapping in __main__ to relabel codes.
    """
    # --- flag errors (111xx) ---
    FLAG_PARSE                  = 11101
    HELP_REQUESTED              = 11102

    # --- positional argument errors (112xx) ---
    MISSING_ARGUMENT            = 11201
    TOO_MANY_ARGUMENTS          = 11202

    def normalize(self):
        """
        return a host-normalized string for this code.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class CommandException(Exception):
    """
    Base fault: a message plus read-only options.

    Well-known options
    - code: FaultCode identifying the failure.
    - title: short lowercase headline.
    - hint: one actionable sentence.
    - any context the raiser wants to attach (position, argument, excess, flag...).
    """
    code = Unset
    title = "command error"

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType({"code": type(self).code, "title": type(self).title} | options)

    def __str__(self):
        return str(self.message) if self.message is not Unset else self.options["title"]

    def __rich__(self):
        main = __import__("__main__")

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        } | getattr(main, "__styles__", {}))

        colorful = self.options.get("colorful", True)

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            return Text(str(fragment), styles[style] if colorful else "")

        prog = getattr(main, "__prog__", self.options.get("prog", "error"))
        code = self.options["code"]

        header = Text.assemble(
            "[ ",
            text(prog, "prog-name"),
            " — ",
            text(code.normalize() if isinstance(code, FaultCode) else "-", "code"),
            " | ",
            text(self.options["title"].title(), "error-title"),
            " ]"
        )
        renders = [header, text(str(self), "error-message")]
        if hint := self.options.get("hint"):
            renders.append(Text.assemble(text(" → ", "hint-arrow"), text(hint, "hint")))
        return Group(*renders)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class FlagParseError(CommandException):
    code = FaultCode.FLAG_PARSE
    title = "bad flag"


class HelpRequested(FlagParseError):
    code = FaultCode.HELP_REQUESTED
    title = "help requested"


class MissingArgumentError(CommandException):
    code = FaultCode.MISSING_ARGUMENT
    title = "missing argument"


class TooManyArgumentsError(CommandException):
    code = FaultCode.TOO_MANY_ARGUMENTS
    title = "too many arguments"


def terminate(code=OK, /):
    """
    Leave the process with the given exit status.
    """
    sys.exit(code)


def exit_with_error(fault, /, **options):
    """
    print a fault (or plain message) to stderr and terminate with status ERR.

    options are merged into CommandException faults via copy.replace before
    rendering (e.g. prog, colorful).
    """
    if isinstance(fault, CommandException):
        fault = copy.replace(fault, **options)
        console(stderr=True, colorful=fault.options.get("colorful", True)).print(fault)
    else:
        console(stderr=True).print(Text.assemble(Text("ERROR: ", "error"), str(fault)))
    terminate(ERR)


__all__ = (
    "OK",
    "ERR",
    "FaultCode",
    "CommandException",
    "FlagParseError",
    "HelpRequested",
    "MissingArgumentError",
    "TooManyArgumentsError",
    "terminate",
    "exit_with_error",
)
