"""
Signal routing.

OS signal handlers cannot carry a context argument, so a single module-level
handler forwards every delivered signal into the active SignalRegistry. All
application code talks to a registry instance; nothing else is global.
"""

from __future__ import annotations

import logging
import signal
import threading
from typing import Any, Callable, Optional

SignalCallback = Callable[[], None]

logger = logging.getLogger(__name__)


class SignalRegistry:
    """
    Maps signal numbers to at most one callback each.

    The map is guarded by a re-entrant lock: Python runs signal handlers on
    the main thread between bytecodes, so a signal may arrive while that same
    thread is inside ``register``. Callbacks are invoked after the lock is
    released and must only do minimal, non-blocking work.
    """

    def __init__(self) -> None:
        self._callbacks: dict[int, SignalCallback] = {}
        self._previous: dict[int, Any] = {}
        self._lock = threading.RLock()

    def register(self, signum: int, callback: SignalCallback) -> None:
        """Store callback for signum, replacing any prior entry."""
        with self._lock:
            self._callbacks[signum] = callback

    def unregister(self, signum: int) -> None:
        """Remove the entry for signum if present."""
        with self._lock:
            self._callbacks.pop(signum, None)

    def dispatch(self, signum: int) -> bool:
        """Invoke the callback for signum. Returns True if one was registered."""
        with self._lock:
            callback = self._callbacks.get(signum)
        if callback is None:
            return False
        callback()
        return True

    def callback_for(self, signum: int) -> Optional[SignalCallback]:
        with self._lock:
            return self._callbacks.get(signum)

    def registered(self) -> list[int]:
        """Signal numbers that currently have a callback."""
        with self._lock:
            return sorted(self._callbacks)

    def replace_all(self, mapping: dict[int, SignalCallback]) -> None:
        """Swap callbacks for several signals in one locked step."""
        with self._lock:
            self._callbacks.update(mapping)

    def clear(self) -> None:
        with self._lock:
            self._callbacks.clear()

    # -- OS binding ---------------------------------------------------------

    def install(self, signum: int) -> bool:
        """
        Route OS delivery of signum into this registry.

        Only the main thread may change OS handlers; elsewhere this logs and
        returns False, leaving the registry usable through ``dispatch``.
        """
        global _active
        try:
            previous = signal.signal(signum, _deliver)
        except (ValueError, OSError) as e:
            logger.warning("Cannot install handler for signal %s: %s", signum, e)
            return False
        with self._lock:
            self._previous.setdefault(signum, previous)
        _active = self
        return True

    def uninstall(self, signum: int) -> None:
        """Restore the OS handler that was in place before ``install``."""
        global _active
        with self._lock:
            if signum not in self._previous:
                return
            previous = self._previous.pop(signum)
            remaining = bool(self._previous)
        try:
            signal.signal(signum, previous if previous is not None else signal.SIG_DFL)
        except (ValueError, OSError) as e:
            logger.warning("Cannot restore handler for signal %s: %s", signum, e)
        if not remaining and _active is self:
            _active = None

    def installed(self) -> list[int]:
        with self._lock:
            return sorted(self._previous)


# The registry OS-delivered signals are forwarded to
_active: Optional[SignalRegistry] = None

default_registry = SignalRegistry()


def _deliver(signum: int, frame: Any) -> None:
    registry = _active
    if registry is not None:
        registry.dispatch(signum)


def active_registry() -> Optional[SignalRegistry]:
    return _active


def signal_name(signum: int) -> str:
    try:
        return signal.Signals(signum).name
    except ValueError:
        return str(signum)
