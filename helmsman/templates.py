r"""
Helmsman help templates.

The command help page is a jinja2 template rendered against a HelpContext, an
immutable record assembled by Command.help_text(). The template output is rich
markup (see helmsman.styles) that still contains {$var} placeholders; those are
substituted by the command before printing.

Sections
- use-for line (always), name/alias line (only for commands owned by an application),
  usage line, fixed global options.
- Options:   only when the command has flags (pre-formatted lines).
- Arguments: only when the command declares positional arguments.
- Examples / Help: only when provided.
"""
from typing import NamedTuple

from jinja2 import Environment, StrictUndefined

from .utils import ucfirst

environment = Environment(
    undefined=StrictUndefined,
    autoescape=False,
    keep_trailing_newline=False,
)
environment.filters["ucfirst"] = ucfirst

COMMAND_HELP = environment.from_string(r"""{{ use_for }}
{% if not_alone %}
[comment]Name:[/] {{ name }}{% if aliases %} (alias: [info]{{ aliases }}[/]){% endif %}{% endif %}
[comment]Usage:[/] {$binName} \[Global Options...] {% if not_alone %}[info]{{ name }}[/] {% endif %}\[--option ...] \[argument ...]

[comment]Global Options:[/]
      [info]--verbose[/]     Set error reporting level(quiet 0 - 4 debug)
      [info]--no-color[/]    Disable color when outputting message
  [info]-h, --help[/]        Display this help information{% if options %}

[comment]Options:[/]
{{ options }}{% endif %}{% if arguments %}

[comment]Arguments:[/]{% for argument in arguments %}
  [info]{{ "%-12s" | format(argument.name) }}[/]{{ argument.descr | ucfirst }}{% if argument.required %}[red]*[/]{% endif %}{% endfor %}
{% endif %} {% if examples %}
[comment]Examples:[/]
{{ examples }}{% endif %}
{% if help %}[comment]Help:[/]
{{ help }}{% endif %}""")


class ArgumentRow(NamedTuple):
    name: str
    descr: str
    required: bool


class HelpContext(NamedTuple):
    use_for: str
    not_alone: bool
    name: str
    aliases: str
    options: str
    arguments: tuple[ArgumentRow, ...]
    examples: str
    help: str


def render_help(context, /):
    """
    Fill COMMAND_HELP with the given HelpContext and return the markup.
    """
    if not isinstance(context, HelpContext):
        raise TypeError("render_help() argument must be a help context")
    return COMMAND_HELP.render(context._asdict())


__all__ = (
    "COMMAND_HELP",
    "ArgumentRow",
    "HelpContext",
    "render_help",
)
