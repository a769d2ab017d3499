"""
This module implements the hook plugin contract.

Plugin modules need to be registered using the simplequeue.hooks entrypoint.
Modules that are registered as such can implement any of the functions:

    def register(registry):
        registry.register("send_email", sendEmail)
        registry.allow("send_email")

    def queueable():
        return ["send_email"]

Both functions are optional. A plugin that cannot register anything in the
current environment should raise NotImplementedError; it is then skipped.
"""
import logging
from operator import attrgetter

from .compat import get_plugins
from .hooks import HookRegistry

logger = logging.getLogger(__name__)
ENTRY_POINT_GROUP = "simplequeue.hooks"


class Plugins(object):
    def __init__(self, plugins=None):
        if plugins is None:
            plugins = {plug.load() for plug in get_plugins(ENTRY_POINT_GROUP)}
        self.plugins = list(sorted(plugins, key=attrgetter("__name__")))
        logger.debug("all plugins: %r", [p.__name__ for p in self.plugins])

    def _pluginCalls(self, func, *args, **kwargs):
        for plugin in self.plugins:
            if not hasattr(plugin, func):
                continue
            name = plugin.__name__
            try:
                result = getattr(plugin, func)(*args, **kwargs)
                logger.debug("plugin %s.%s => %r", name, func, result)
                yield result
            except NotImplementedError:
                logger.debug("plugin %s NotImplementedError", name)
                continue

    def registerHooks(self, registry: HookRegistry) -> HookRegistry:
        for _ in self._pluginCalls("register", registry):
            pass
        for hooks in self._pluginCalls("queueable"):
            for hook in hooks or ():
                registry.allow(hook)
        return registry
