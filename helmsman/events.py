"""
Lifecycle notifications for command runs.

Every top-level command owns two channels, derived on demand from its display
name (nothing is stored on the command definition):

- "ondidrunstart" + name: dispatched once name resolution succeeded, with the
  full input line (tokens joined by single spaces).
- "ondidrunfinish" + name: dispatched after the run handler completed, with the
  handler's return value (which may be None).

Channel names are plain case-sensitive concatenations without separator; other
parts of an application interoperate by deriving them the same way (channel()).

Events keeps ordered subscriber lists per channel. Dispatching iterates over a
snapshot, so disposing a subscription from inside a callback only takes effect
on the next dispatch. Callback exceptions are not caught.
"""
from collections import defaultdict

from .utils import rename

_PREFIXES = {
    "start": "ondidrunstart",
    "finish": "ondidrunfinish",
}


def channel(name, kind, /):
    """
    Return the channel name for a top-level command and a lifecycle phase.

    >>> channel("build", "start")
    'ondidrunstartbuild'
    """
    if not isinstance(name, str):
        raise TypeError("channel() first argument must be a string")
    try:
        return _PREFIXES[kind] + name
    except KeyError:
        raise ValueError(f"channel() kind must be one of {', '.join(map(repr, _PREFIXES))}") from None


class Disposable:
    """
    Handle returned by Events.subscribe(); dispose() removes that subscription.

    Disposing twice is a no-op. Also usable as a context manager, disposing on exit.
    """
    __slots__ = ("_dispose", "_disposed")

    def __init__(self, dispose, /):
        self._dispose = dispose
        self._disposed = False

    @property
    def disposed(self):
        return self._disposed

    def dispose(self):
        if self._disposed:
            return
        self._disposed = True
        self._dispose()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.dispose()

    def __repr__(self):
        return f"disposable(disposed={self._disposed!r})"


class Events:
    """
    Channel-keyed publish/subscribe hub for lifecycle notifications.
    """

    def __init__(self):
        self._subscribers = defaultdict(list)

    def subscribe(self, channel, callback, /):
        if not isinstance(channel, str):
            raise TypeError("subscribe() first argument must be a string")
        if not callable(callback):
            raise TypeError("subscribe() second argument must be callable")

        # Wrap so the same callable can be subscribed twice and disposed separately.
        @rename("subscription")
        def subscription(payload):
            return callback(payload)

        self._subscribers[channel].append(subscription)

        def dispose():
            subscribers = self._subscribers.get(channel, [])
            if subscription in subscribers:
                subscribers.remove(subscription)
            if not subscribers:
                self._subscribers.pop(channel, None)

        return Disposable(dispose)

    def dispatch(self, channel, payload=None, /):
        for subscription in tuple(self._subscribers.get(channel, ())):
            subscription(payload)

    def subscribers(self, channel, /):
        """
        Number of live subscriptions on a channel.
        """
        return len(self._subscribers.get(channel, ()))

    def on_did_run_start(self, name, callback, /):
        return self.subscribe(channel(name, "start"), callback)

    def on_did_run_finish(self, name, callback, /):
        return self.subscribe(channel(name, "finish"), callback)


__all__ = (
    "Disposable",
    "Events",
    "channel",
)
