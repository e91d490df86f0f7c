"""
Editor session helpers.

EditingSession is an explicit state container handed to whatever renders the
editor (save indicator, theme). DebouncedSaver schedules persist calls after a
quiet period, keeping a single pending timer per edited entity.
FieldAutosaver merges field edits per entity so the delayed call saves all of them.
"""
import logging
import threading
from datetime import datetime
from functools import partial
from typing import Any, Callable, Dict, Hashable, List, Optional, Tuple

from django.conf import settings
from django.utils import timezone
from django.utils.timesince import timesince

logger = logging.getLogger(__name__)


class EditingSession:
    """
    Process-local state for one editing session.

    Keys used by the editor: ``is_saving``, ``last_saved`` and ``theme``.
    Subscribers are called with ``(key, value)`` after every ``set``.
    """

    DEFAULTS = {
        'is_saving': False,
        'last_saved': None,
        'theme': 'light',
    }

    def __init__(self, **initial: Any):
        self._state: Dict[str, Any] = {**self.DEFAULTS, **initial}
        self._subscribers: List[Callable[[str, Any], None]] = []
        self._lock = threading.Lock()

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            return self._state.get(key, default)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._state[key] = value
            subscribers = list(self._subscribers)
        for callback in subscribers:
            callback(key, value)

    def subscribe(self, callback: Callable[[str, Any], None]) -> Callable[[], None]:
        """
        Register a change listener.

        Returns:
            A function that removes the listener again.
        """
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    def mark_saving(self) -> None:
        self.set('is_saving', True)

    def mark_saved(self, when: Optional[datetime] = None) -> None:
        self.set('last_saved', when or timezone.now())
        self.set('is_saving', False)

    def save_status(self, now: Optional[datetime] = None) -> str:
        """Human readable save indicator text."""
        if self.get('is_saving'):
            return "Saving changes..."

        last_saved = self.get('last_saved')
        if not last_saved:
            return "Ready to save"

        now = now or timezone.now()
        if (now - last_saved).total_seconds() < 60:
            return "Saved just now"
        return f"Saved {timesince(last_saved, now, depth=1)} ago"


class DebouncedSaver:
    """
    Delay persist calls until edits stop for ``quiet_period`` seconds.

    Each entity key owns at most one pending timer; scheduling again for the
    same key cancels the previous call.
    """

    def __init__(self, quiet_period: Optional[float] = None, *, session: Optional[EditingSession] = None):
        if quiet_period is None:
            quiet_period = getattr(settings, 'AUTOSAVE_QUIET_PERIOD_SECONDS', 2.0)
        self.quiet_period = quiet_period
        self.session = session
        # key -> (timer, call, token)
        self._pending: Dict[Hashable, Tuple[threading.Timer, Callable[[], Any], object]] = {}
        self._lock = threading.Lock()

    def schedule(self, key: Hashable, func: Callable[..., Any], *args: Any, **kwargs: Any) -> None:
        """Schedule ``func(*args, **kwargs)`` for ``key``, replacing any pending call."""
        token = object()
        call = partial(func, *args, **kwargs)
        timer = threading.Timer(self.quiet_period, self._fire, args=(key, token))
        timer.daemon = True
        with self._lock:
            previous = self._pending.pop(key, None)
            self._pending[key] = (timer, call, token)
        if previous is not None:
            previous[0].cancel()
        timer.start()

    def cancel(self, key: Hashable) -> bool:
        with self._lock:
            entry = self._pending.pop(key, None)
        if entry is None:
            return False
        entry[0].cancel()
        return True

    def pending(self, key: Hashable) -> bool:
        with self._lock:
            return key in self._pending

    def flush(self) -> None:
        """Run every pending call now instead of waiting for its timer."""
        with self._lock:
            entries = list(self._pending.items())
        for key, (timer, _, token) in entries:
            timer.cancel()
            self._fire(key, token)

    def _fire(self, key: Hashable, token: object) -> None:
        with self._lock:
            entry = self._pending.get(key)
            # A newer schedule() replaced this call
            if entry is None or entry[2] is not token:
                return
            del self._pending[key]
        call = entry[1]

        if self.session is not None:
            self.session.mark_saving()
        try:
            call()
        except Exception:  # noqa: BLE001
            logger.exception("Autosave for %r failed", key)
            if self.session is not None:
                self.session.set('is_saving', False)
            return
        if self.session is not None:
            self.session.mark_saved()


class FieldAutosaver:
    """
    Collect field edits per entity and persist them in one debounced call.

    Every ``edit`` merges its changes into the pending set for ``key`` and
    reschedules ``persist(changes)`` on the underlying DebouncedSaver.
    """

    def __init__(self, saver: Optional[DebouncedSaver] = None):
        self.saver = saver or DebouncedSaver()
        self._changes: Dict[Hashable, Dict[str, Any]] = {}
        self._lock = threading.Lock()

    def edit(self, key: Hashable, changes: Dict[str, Any], persist: Callable[[Dict[str, Any]], Any]) -> None:
        with self._lock:
            self._changes.setdefault(key, {}).update(changes)
        self.saver.schedule(key, self._persist, key, persist)

    def pending_changes(self, key: Hashable) -> Dict[str, Any]:
        with self._lock:
            return dict(self._changes.get(key, {}))

    def flush(self) -> None:
        self.saver.flush()

    def _persist(self, key: Hashable, persist: Callable[[Dict[str, Any]], Any]) -> None:
        with self._lock:
            changes = self._changes.pop(key, None)
        if changes:
            persist(changes)
