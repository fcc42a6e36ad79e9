"""
Helmsman hooks: named lifecycle events scoped to one command.

A Hooks registry maps an event name to the handlers registered for it. Handlers
are called in registration order as handler(command, data). Firing is
fire-and-forget: a failing handler is logged and the remaining handlers still run.

Lifecycle events fired by Command
- EVT_INIT   ("init"):   once, when the command is initialized (data: None).
- EVT_BEFORE ("before"): before the handler runs (data: the raw argument list).
- EVT_AFTER  ("after"):  after the handler succeeded (data: None).
- EVT_ERROR  ("error"):  after the handler raised (data: the exception).
"""
from collections import defaultdict

from .logs import logger

EVT_INIT = "init"
EVT_BEFORE = "before"
EVT_AFTER = "after"
EVT_ERROR = "error"


class Hooks:
    """
    Mapping of event name to an ordered list of handlers.
    """

    def __init__(self):
        self._hooks = defaultdict(list)

    def on(self, name, handler, /):
        """
        Register handler for the event name and return it (decorator friendly).
        """
        if not isinstance(name, str) or not (name := name.strip()):
            raise ValueError("hook event name must be a non-empty string")
        if not callable(handler):
            raise TypeError(f"hook handler for {name!r} must be callable")
        self._hooks[name].append(handler)
        return handler

    def fire(self, name, command, data=None, /):
        """
        Call every handler registered for name with (command, data).

        Failures raised by a handler are logged, never propagated.
        """
        for handler in tuple(self._hooks.get(name, ())):
            try:
                handler(command, data)
            except Exception:
                logger.exception("hook %r for event %r failed", getattr(handler, "__qualname__", handler), name)

    def has(self, name, /):
        return bool(self._hooks.get(name))

    def handlers(self, name, /):
        return tuple(self._hooks.get(name, ()))

    def clear(self):
        self._hooks = defaultdict(list)

    def __len__(self):
        return sum(map(len, self._hooks.values()))


__all__ = (
    "EVT_INIT",
    "EVT_BEFORE",
    "EVT_AFTER",
    "EVT_ERROR",
    "Hooks",
)
