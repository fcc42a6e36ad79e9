"""
Helmsman styling: a rich theme for the inline style tags used in help text.

Help templates and option lines are written in rich markup with a small set of
semantic tags:

    [comment]Usage:[/]  [info]--name[/]  [magenta]string[/]  [cyan]"default"[/]  [red]*[/]

console() returns a themed rich Console that resolves those tags, render() turns
markup into a rich Text and strip() drops the tags again (used to measure the
visible width of a line).

User-supplied text (summaries, help, examples, descriptions) goes through
translate() first: square brackets stay literal, and the same styles can be
requested with angle tags, e.g. "<info>--force</> overwrites files".

Customization
- Define a mapping named __styles__ in __main__ to override any palette entry.
- NO_COLOR in the environment (or colorful=False) disables colors entirely.
"""
import re

from rich.console import Console
from rich.markup import escape
from rich.text import Text
from rich.theme import Theme

STYLES = {
    # === Help sections ===
    "comment": "bold #FFD600",  # AMBER section labels
    "info": "bold #22C55E",  # GREEN names
    "magenta": "#FF4D94",  # MAGENTA value-type hints
    "cyan": "#00E6FF",  # CYAN defaults
    "red": "bold #EF4444",  # RED required marker

    # === Messages ===
    "error": "bold #EF4444",
    "warning": "bold #FFD600",
    "notice": "#9CA3AF",
}


def theme():
    """
    Build the active theme: the default palette merged with __main__.__styles__.
    """
    return Theme(STYLES | getattr(__import__("__main__"), "__styles__", {}))


def console(*, stderr=False, colorful=True):
    """
    Create a themed console writing to stdout (or stderr).
    """
    return Console(stderr=stderr, theme=theme(), no_color=not colorful or None, highlight=False, soft_wrap=True)


_TAG = re.compile(r"</>|<([a-z][\w-]*)>")


def translate(text, /):
    """
    Turn user text into markup: literal brackets are escaped and <name>...</> tags
    naming a palette style become style tags:
    "run <info>tool</> [target]" reads "run [info]tool[/] \\[target]".
    """
    names = STYLES.keys() | getattr(__import__("__main__"), "__styles__", {}).keys()
    parts = []
    depth = position = 0

    for match in _TAG.finditer(text):
        if (name := match.group(1)) is None and depth:
            depth -= 1
            tag = "[/]"
        elif name is not None and name in names:
            depth += 1
            tag = f"[{name}]"
        else:
            continue
        parts.append(escape(text[position:match.start()]))
        parts.append(tag)
        position = match.end()

    parts.append(escape(text[position:]))
    return "".join(parts)


def render(markup, /):
    """
    Parse style tags into a rich Text.
    """
    return Text.from_markup(markup)


def strip(markup, /):
    """
    Drop style tags, returning only the visible text.
    """
    return Text.from_markup(markup).plain


__all__ = (
    "STYLES",
    "theme",
    "console",
    "translate",
    "render",
    "strip",
)
