"""
Explicit registry of hook handlers.

A hook is a name that maps to an ordered list of handlers.  Dispatching a
hook threads a value through the handlers: each handler receives the value
returned by the previous one (the first receives the dispatch input) and
returns the next value.  A handler fails the chain by raising a QueueError
(normally HookError) or by returning one; the remaining handlers are not
called.

Whether a hook may be queued at all is a separate allow-list, independent
of whether any handler is registered for it.
"""

from __future__ import annotations

import itertools
import logging
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from simplequeue.errors import QueueError

LOG = logging.getLogger(__name__)

DEFAULT_PRIORITY = 10

Handler = Callable[[Any], Any]


class HookRegistry(object):
    def __init__(self, queueable: Iterable[str] = ()):
        self._handlers: Dict[str, List[Tuple[int, int, Handler]]] = {}
        self._queueable = set(queueable)
        self._seq = itertools.count()

    def register(self, hook: str, handler: Handler,
                 priority: int = DEFAULT_PRIORITY) -> Handler:
        """
        Add ``handler`` to ``hook``.

        Handlers run in ascending priority; handlers with equal priority run
        in registration order.
        """
        entries = self._handlers.setdefault(hook, [])
        entries.append((priority, next(self._seq), handler))
        entries.sort(key=lambda entry: entry[:2])
        LOG.debug("registered handler %r for hook %r (priority %d)",
                  handler, hook, priority)
        return handler

    def handler(self, hook: str, priority: int = DEFAULT_PRIORITY):
        """Decorator form of ``register``."""
        def _register(func):
            return self.register(hook, func, priority=priority)
        return _register

    def unregister(self, hook: str, handler: Optional[Handler] = None) -> None:
        """Remove one handler, or every handler when ``handler`` is None."""
        if handler is None:
            self._handlers.pop(hook, None)
            return
        entries = [entry for entry in self._handlers.get(hook, [])
                   if entry[2] != handler]
        if entries:
            self._handlers[hook] = entries
        else:
            self._handlers.pop(hook, None)

    def allow(self, hook: str) -> None:
        self._queueable.add(hook)

    def disallow(self, hook: str) -> None:
        self._queueable.discard(hook)

    def is_queueable(self, hook: str) -> bool:
        return hook in self._queueable

    def has_listener(self, hook: str) -> bool:
        return bool(self._handlers.get(hook))

    def handlers(self, hook: str) -> List[Handler]:
        return [entry[2] for entry in self._handlers.get(hook, [])]

    def hooks(self) -> List[str]:
        """All hook names that are registered or queueable."""
        return sorted(set(self._handlers) | self._queueable)

    def dispatch(self, hook: str, value: Any = None) -> Any:
        """
        Run the handler chain for ``hook`` and return the final value.

        Raises:
            QueueError: Raised or returned by a handler; stops the chain
        """
        for handler in self.handlers(hook):
            value = handler(value)
            if isinstance(value, QueueError):
                LOG.debug("hook %r handler %r returned error %s",
                          hook, handler, value)
                raise value
        return value
