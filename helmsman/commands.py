"""
Helmsman command layer: build, bind, run and document CLI commands.

What this module provides
- Command: a runnable unit binding together
  • a name, aliases, a one-line "use for" summary, help text and examples;
  • a FlagSet of options (with single-letter shortcuts);
  • an ordered list of positional Arguments;
  • a handler called as handler(command, args);
  • lifecycle hooks (init, before, after, error);
  • an optional owning application (strict argument count + error aggregation).

- command(...): decorator building a Command from a handler function.

Running
- Command.execute(args): bind positional arguments, fire "before", call the handler,
  then fire "after" (success) or "error" (the handler raised; the exception is
  recorded on the owning application and re-raised).
- Command.run(args=None): standalone entry point. Parses flags from args (or
  sys.argv[1:]) first; -h/--help prints help and exits 0, any other flag error is
  printed and exits with status 2.

Help
- Command.parse_defaults(): one styled line per flag, shortcuts merged onto the
  long option's line, defaults shown unless they are a zero value.
- Command.help_text()/show_help(): fill the help template, substitute {$var}
  placeholders and print the styled page.

Quick start
    from helmsman import command

    @command("greet", "say hello to someone")
    def greet(cmd, args):
        print(f"hello {cmd.arg('name').as_str()}" + "!" * cmd.flags.lookup("loud").value.get())

    greet.add_arg("name", "who to greet", required=True)
    greet.bool_opt("loud", "l", descr="shout the greeting")

    if __name__ == "__main__":
        greet.run()

Standalone vs attached
- A command without an owning application is standalone: no strict argument count,
  no error aggregation. attach_to(app) (or app= at construction) flips it.
"""
import copy
import functools
import inspect
import operator
import os.path
import re
import sys
from datetime import timedelta

from rich.markup import escape
from rich.text import Text

from .arguments import Argument
from .faults import *
from .flags import *
from .hooks import *
from .logs import configure, logger
from .styles import console, render, strip, translate
from .templates import ArgumentRow, HelpContext, render_help
from .utils import *


class CommandType(type):
    """
    Metaclass exposing command metadata as read-only, introspectable properties.

    - __typename__ is derived from the class name for consistent messaging.
    - every name in __introspectable__ becomes a property mirroring self._<name>.
    - __displayable__ narrows the fields shown by __repr__/__rich_repr__.
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
            - command(name='build', use_for='Build the project', ...)
            """
            return f"{type(self).__typename__}({', '.join(map(functools.partial(operator.mod, '%s=%r'), self.__rich_repr__()))})"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


_NAME = re.compile(r"[a-zA-Z][\w-]*")


class Command(metaclass=CommandType):
    """
    A named, runnable command with flags, positional arguments, a handler and hooks.

    Lifecycle
    - Constructed with its metadata; flags/arguments/hooks are added afterwards.
    - initialize() runs once (automatically in standalone run()): normalizes the
      use-for line, calls the config callback and fires the "init" event.
    - execute()/run() may be called repeatedly; each run rebinds the arguments.
    - copy() produces a reusable duplicate without handler nor hooks.
    """

    __introspectable__ = (
        "name",
        "use_for",
        "aliases",
        "help",
        "examples",
        "func",
        "flags",
        "arguments",
        "hooks",
        "app",
        "alone",
        "colorful",
    )

    __displayable__ = (
        "name",
        "use_for",
        "aliases",
        "arguments",
        "alone",
    )

    def __init__(
            self,
            name,
            /,
            use_for="",
            func=None,
            *,
            aliases=(),
            help="",
            examples="",
            config=None,
            app=None,
            colorful=True,
    ):
        """
        Construct a command.

        Parameters
        - name: str
          Command name, must match ^[a-zA-Z][\\w-]*$.
        - use_for: str
          One-line summary, first line of the help page.
        - func: Callable[[Command, list[str]], Any] | None
          Handler called by execute(); may be set later with @cmd.handler.
        - aliases: Iterable[str]
          Alternative names (shown on the help page of attached commands).
        - help, examples: str
          Free-form help and examples sections; may contain {$var} placeholders
          and <name>...</> style tags (square brackets print literally).
        - config: Callable[[Command], Any] | None
          Called once by initialize(), typically to register flags and arguments.
        - app: Application | None
          Owning application; see attach_to().
        - colorful: bool
          Whether help and faults are printed with colors.

        Raises
        - TypeError/ValueError on invalid names, aliases or callables.
        """
        if not isinstance(name, str):
            raise TypeError(f"{type(self).__typename__} 'name' must be a string")
        elif not _NAME.fullmatch(name := name.strip()):
            raise ValueError(f"{type(self).__typename__} name {name!r} is invalid, must match ^[a-zA-Z][\\w-]*$")

        if isinstance(aliases, str):
            aliases = (aliases,)
        for alias in aliases:
            if not isinstance(alias, str) or not _NAME.fullmatch(alias):
                raise ValueError(f"{type(self).__typename__} {name!r} alias {alias!r} is invalid")

        for label, value in (("use_for", use_for), ("help", help), ("examples", examples)):
            if not isinstance(value, str | Text):
                raise TypeError(f"{type(self).__typename__} {label!r} must be a string")

        if func is not None and not callable(func):
            raise TypeError(f"{type(self).__typename__} 'func' must be callable")
        if config is not None and not callable(config):
            raise TypeError(f"{type(self).__typename__} 'config' must be callable")

        self._name = name
        self._use_for = str(use_for).strip()
        self._aliases = list(aliases)
        self._help = str(help).strip()
        self._examples = str(examples).strip("\n")
        self._func = func
        self._config = config
        self._colorful = bool(colorful)
        self._flags = FlagSet(name)
        self._arguments = []
        self._indexes = {}
        self._hooks = Hooks()
        self._shortcuts = {}
        self._vars = {}
        self._app = None
        self._alone = True
        self._initialized = False

        if app is not None:
            self.attach_to(app)

    # ── identity ────────────────────────────────────────────────────────────

    @property
    def not_alone(self):
        """
        True when the command belongs to an application.
        """
        return not self._alone

    @property
    def aliases_string(self):
        return ",".join(self._aliases)

    def attach_to(self, app, /):
        """
        Attach the command to an owning application.

        The application must expose a boolean 'strict' attribute and an
        add_error(error) method; it may expose a 'vars' mapping of help variables.
        """
        if not hasattr(app, "strict") or not callable(getattr(app, "add_error", None)):
            raise TypeError(f"{type(self).__typename__} 'app' must provide 'strict' and 'add_error()'")
        self._app = app
        self._alone = False
        return self

    def handler(self, func, /):
        """
        Set the handler; returns func so it can be used as a decorator (@cmd.handler).
        """
        if not callable(func):
            raise TypeError(f"{type(self).__typename__} handler must be callable")
        self._func = func
        return func

    # ── help variables ──────────────────────────────────────────────────────

    @property
    def vars(self):
        """
        Help variables usable as {$name} in help, examples and use-for text.
        """
        bin_name = os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else self._name
        return {
            "binName": bin_name,
            "workDir": os.getcwd(),
            "cmd": self._name,
            "fullCmd": f"{bin_name} {self._name}",
        } | dict(getattr(self._app, "vars", None) or {}) | self._vars

    def add_vars(self, vars, /):
        for name, value in dict(vars).items():
            self._vars[str(name)] = str(value)
        return self

    def get_var(self, name, default="", /):
        return self.vars.get(name, default)

    def replace_vars(self, text, /, *, markup=False):
        """
        Substitute every {$name} placeholder found in text.

        With markup=True the values are escaped so they print literally.
        """
        if "{$" not in text:
            return text
        for name, value in self.vars.items():
            value = str(value)
            text = text.replace("{$%s}" % name, escape(value) if markup else value)
        return text

    # ── positional arguments ────────────────────────────────────────────────

    def add_arg(self, name, descr="", required=False, array=False):
        """
        Declare a positional argument and return it.
        """
        return self.add_argument(Argument(name, descr, required, array))

    def add_argument(self, argument, /):
        """
        Append an Argument spec.

        Rules
        - names are unique within a command;
        - nothing can follow an array argument;
        - a required argument cannot follow an optional one.
        """
        if not isinstance(argument, Argument):
            raise TypeError(f"{type(self).__typename__} argument must be an argument")
        if argument.name in self._indexes:
            raise ValueError(f"the argument name {argument.name!r} already exists in command {self._name!r}")
        if self._arguments and self._arguments[-1].array:
            raise ValueError(f"command {self._name!r} already has an array argument, it must be the last one")
        if argument.required and any(not existing.required for existing in self._arguments):
            raise ValueError(f"required argument {argument.name!r} cannot be defined after an optional argument")

        argument._index = len(self._arguments)
        self._indexes[argument.name] = argument._index
        self._arguments.append(argument)
        return argument

    def arg(self, name, /):
        """
        Return the argument declared under name.
        """
        try:
            return self._arguments[self._indexes[name]]
        except KeyError:
            raise KeyError(f"command {self._name!r} has no argument {name!r}") from None

    def arg_at(self, index, /):
        """
        Return the argument at the 0-based index.
        """
        try:
            return self._arguments[index]
        except IndexError:
            raise IndexError(f"command {self._name!r} has no argument at index {index}") from None

    def collect_named_args(self, tokens, /):
        """
        Bind positional tokens to the declared arguments, in order.

        - A required argument beyond the given tokens raises MissingArgumentError;
          an optional one stops the binding (optional arrays bind to []).
        - An array argument consumes every remaining token.
        - Attached to a strict application, leftover tokens raise TooManyArgumentsError.

        Every run starts from unbound arguments; values bound before a failure
        are kept.
        """
        tokens = list(tokens)
        count = len(tokens)
        number = 0

        for argument in self._arguments:
            argument._value = None

        for index, argument in enumerate(self._arguments):
            number = index + 1
            if number > count:
                if argument.required:
                    raise MissingArgumentError(
                        f"must set value for the argument: {argument.show_name} (position {number})",
                        argument=argument.name,
                        position=number,
                        prog=self._name,
                        colorful=self._colorful,
                        hint=f"run '{self._name} --help' to see the expected arguments",
                    )
                if argument.array:
                    argument._value = []
                break

            if argument.array:
                argument._value = tokens[index:]
                count = number
            else:
                argument._value = tokens[index]

        if not self._alone and self._app.strict and count > number:
            excess = tokens[number:]
            raise TooManyArgumentsError(
                f"entered too many arguments: {' '.join(excess)}",
                excess=excess,
                prog=self._name,
                colorful=self._colorful,
                hint="remove the extra inputs",
            )

    # ── options ─────────────────────────────────────────────────────────────

    def _add_option(self, value, name, short, descr):
        if not isinstance(name, str) or not (name := name.strip("- ")):
            raise ValueError(f"{type(self).__typename__} option name cannot be empty")

        if short:
            if not isinstance(short, str) or len(short := short.strip("- ")) != 1:
                raise ValueError(f"option {name!r} shortcut must be a single character")
            if short in self._shortcuts:
                raise ValueError(f"shortcut '-{short}' is already used by option {self._shortcuts[short]!r}")
            if short in self._flags:
                raise ValueError(f"shortcut '-{short}' clashes with an existing option")

        self._flags.var(value, name, descr)
        if short:
            self._flags.var(value, short, descr)
            self._shortcuts[short] = name
        return value

    def bool_opt(self, name, short="", /, default=False, descr=""):
        return self._add_option(BoolValue(default), name, short, descr)

    def str_opt(self, name, short="", /, default="", descr=""):
        return self._add_option(StringValue(default), name, short, descr)

    def int_opt(self, name, short="", /, default=0, descr=""):
        return self._add_option(IntValue(default), name, short, descr)

    def uint_opt(self, name, short="", /, default=0, descr=""):
        return self._add_option(UintValue(default), name, short, descr)

    def float_opt(self, name, short="", /, default=0.0, descr=""):
        return self._add_option(FloatValue(default), name, short, descr)

    def duration_opt(self, name, short="", /, default=timedelta(0), descr=""):
        return self._add_option(DurationValue(default), name, short, descr)

    def var_opt(self, value, name, short="", /, descr=""):
        """
        Register a custom flag value (any helmsman.flags.Value subclass).
        """
        return self._add_option(value, name, short, descr)

    def short_name(self, name, /):
        """
        Return the single-letter shortcut registered for option name, or "".
        """
        for short, long in self._shortcuts.items():
            if long == name:
                return short
        return ""

    def is_shortcut(self, short, /):
        return short in self._shortcuts

    # ── hooks ───────────────────────────────────────────────────────────────

    def on(self, name, handler, /):
        """
        Register a hook handler called as handler(command, data).
        """
        logger.debug("[Command.on] command %r add hook: %s", self._name, name)
        return self._hooks.on(name, handler)

    def fire(self, name, data=None, /):
        logger.debug("[Command.fire] command %r trigger the event: %s", self._name, name)
        self._hooks.fire(name, self, data)

    # ── running ─────────────────────────────────────────────────────────────

    def initialize(self):
        """
        One-time setup: capitalize the use-for line (and use it as the default help),
        call the config callback, then fire the "init" event.
        """
        if self._initialized:
            return self
        self._initialized = True

        if self._use_for:
            self._use_for = ucfirst(self._use_for)
            if not self._help:
                self._help = self._use_for

        if self._config is not None:
            self._config(self)

        self.fire(EVT_INIT)
        return self

    def execute(self, args, /):
        """
        Bind args, then run the handler between the lifecycle hooks.

        Raises
        - MissingArgumentError/TooManyArgumentsError before any hook fires.
        - whatever the handler raised, after recording it on the owning
          application and firing the "error" hook.
        """
        args = list(args)
        self.collect_named_args(args)

        self.fire(EVT_BEFORE, args)

        if self._func is None:
            logger.warning("[Command.execute] the command %r has no handler func to run", self._name)
        else:
            try:
                self._func(self, args)
            except Exception as error:
                if not self._alone:
                    self._app.add_error(error)
                self.fire(EVT_ERROR, error)
                raise

        self.fire(EVT_AFTER)

    def run(self, args=None, /):
        """
        Run the command.

        Standalone commands initialize themselves, parse their flags from args
        (sys.argv[1:] when None or empty) and execute with the remaining tokens.
        A command attached to an application executes args directly.
        """
        args = list(args or ())

        if self._alone:
            configure(colorful=self._colorful)
            self.initialize()

            if not args:
                args = sys.argv[1:]

            try:
                args = self._flags.parse(args)
            except HelpRequested:
                self.show_help(quit=True)
            except FlagParseError as error:
                exit_with_error(error, prog=self._name, colorful=self._colorful)

        return self.execute(args)

    def copy(self):
        """
        Return a duplicate sharing name, metadata and flags, without handler nor hooks.

        Argument specs are copied so binding the duplicate leaves this command untouched.
        """
        duplicate = copy.copy(self)
        duplicate._func = None
        duplicate._hooks = Hooks()
        duplicate._aliases = list(self._aliases)
        duplicate._arguments = [copy.copy(argument) for argument in self._arguments]
        duplicate._indexes = dict(self._indexes)
        duplicate._shortcuts = dict(self._shortcuts)
        duplicate._vars = dict(self._vars)
        return duplicate

    # ── help ────────────────────────────────────────────────────────────────

    def parse_defaults(self):
        """
        Describe every flag on one entry, in lexicographic order.

        - long options with a shortcut render as "-s, --name", without as "--name";
        - shortcuts themselves are not listed again;
        - the value name comes from the first back-quoted word of the usage, or the
          value type ("string", "int", ...; nothing for booleans);
        - defaults are appended unless they are a zero value, strings quoted.
        """
        lines = []

        for flag in self._flags:
            if flag.long:
                if short := self.short_name(flag.name):
                    line = f"  [info]-{short}, --{flag.name}[/]"
                else:
                    line = f"      [info]--{flag.name}[/]"
            else:
                if self.is_shortcut(flag.name):
                    continue
                line = f"  [info]-{flag.name}[/]"

            name, usage = unquote_usage(flag)
            if name:
                line += f" [magenta]{escape(name)}[/]"

            # Single-letter booleans keep their usage on the same line.
            if len(strip(line)) <= 4:
                line += "\t"
            else:
                line += "\n    \t"
            line += translate(ucfirst(usage)).replace("\n", "\n    \t")

            if not is_zero_value(flag, flag.default):
                if isinstance(flag.value, StringValue):
                    line += f" (default [cyan]{escape(quote(flag.default))}[/])"
                else:
                    line += f" (default [cyan]{escape(flag.default)}[/])"

            lines.append(line)

        return "\n".join(lines)

    def help_text(self):
        """
        Return the filled help page as markup ({$var} substituted).

        User text is passed through translate(): brackets print literally and
        <name>...</> tags select palette styles.
        """
        context = HelpContext(
            use_for=translate(self._use_for),
            not_alone=self.not_alone,
            name=self._name,
            aliases=translate(self.aliases_string),
            options=self.parse_defaults(),
            arguments=tuple(
                ArgumentRow(argument.name, translate(ucfirst(str(argument.descr))), argument.required)
                for argument in self._arguments
            ),
            examples=translate(self._examples),
            help=translate(self._help),
        )
        return self.replace_vars(render_help(context), markup=True)

    def show_help(self, quit=False):
        """
        Print the help page; with quit=True, exit with status OK afterwards.
        """
        console(colorful=self._colorful).print(render(self.help_text()))
        if quit:
            terminate(OK)


def command(source=Unset, /, use_for=Unset, **options):
    """
    Build a Command from a handler function.

    Invocation modes
    - Bare decorator: @command: name from the function (underscores become dashes),
      use-for from the first docstring line.
    - Configured decorator: @command("name", "use for", aliases=[...], ...)

    Options are forwarded to Command (aliases, help, examples, config, app, colorful).
    """
    @rename("command")
    def wrapper(func, /):
        if not callable(func):
            raise TypeError("@command() must be applied to a callable")
        name = source if isinstance(source, str) else func.__name__.strip("_").replace("_", "-")
        summary = (inspect.getdoc(func) or "").partition("\n")[0]
        return Command(name, coalesce(use_for, summary), func, **options)

    if callable(source):
        return wrapper(source)
    if not isinstance(source, str | Unset):
        raise TypeError("command() first argument must be a name or a callable")
    return wrapper


__all__ = (
    "Command",
    "command",
)

del CommandType
