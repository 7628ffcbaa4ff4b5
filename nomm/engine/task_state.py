# Path: nomm/engine/task_state.py
"""
Task State Store

Observable progress/error snapshots for in-flight installs.

Architecture:
- TaskState: immutable snapshot (phase, progress, error, cancel hook)
- TaskStateStore: per-target map plus one slot for the protected
  prerequisite, with listeners notified on every mutation

Lifecycle: an entry exists only while an operation on that key is
active. The coordinator inserts on start and removes on end.
"""

import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional

from nomm.core.logger import get_logger
from nomm.constants import PHASE_DOWNLOADING, PHASE_EXTRACTING

logger = get_logger(__name__, 'engine')

StateListener = Callable[[str, Optional['TaskState'], bool], None]


class TaskPhase(Enum):
    DOWNLOADING = PHASE_DOWNLOADING
    EXTRACTING = PHASE_EXTRACTING


@dataclass(frozen=True)
class TaskState:
    """
    Snapshot of one install.

    Attributes:
        phase: Downloading or Extracting
        progress: Fraction 0..1 while the download size is known, else None
        error: Terminal error message, published just before removal
        is_cancellable: Whether cancel() does anything
        on_cancel: Action requesting cancellation of the whole operation
    """
    phase: TaskPhase
    progress: Optional[float] = 0.0
    error: Optional[str] = None
    is_cancellable: bool = True
    on_cancel: Optional[Callable[[], Any]] = field(default=None, repr=False, compare=False)

    def cancel(self) -> bool:
        """
        Request cancellation.

        Only honored while downloading; extraction runs to completion.

        Returns:
            True if a cancellation was requested
        """
        if not self.is_cancellable or self.phase is not TaskPhase.DOWNLOADING:
            return False
        if self.on_cancel is None:
            return False
        self.on_cancel()
        return True


class TaskStateStore:
    """
    Observable mapping from target identifier to TaskState.

    The protected prerequisite is held in its own optional slot rather
    than in the per-target map.

    Example:
        store = TaskStateStore()
        unsubscribe = store.subscribe(lambda target, state, prereq: print(target, state))
        store.update('MyMod', TaskState(TaskPhase.DOWNLOADING, 0.0))
        store.clear('MyMod')
        unsubscribe()
    """

    def __init__(self):
        self._states: dict[str, TaskState] = {}
        self._prerequisite: Optional[TaskState] = None
        self._listeners: list[StateListener] = []
        self._lock = threading.Lock()

    @property
    def statuses(self) -> dict[str, TaskState]:
        """Copy of the per-target map."""
        with self._lock:
            return dict(self._states)

    @property
    def prerequisite(self) -> Optional[TaskState]:
        return self._prerequisite

    def get(self, target_id: str, prerequisite: bool = False) -> Optional[TaskState]:
        if prerequisite:
            return self._prerequisite
        with self._lock:
            return self._states.get(target_id)

    def update(self, target_id: str, state: TaskState, prerequisite: bool = False) -> None:
        """Insert or replace the state for a target."""
        with self._lock:
            if prerequisite:
                self._prerequisite = state
            else:
                self._states[target_id] = state
        self._notify(target_id, state, prerequisite)

    def clear(self, target_id: str, prerequisite: bool = False) -> None:
        """Remove the state for a target."""
        with self._lock:
            if prerequisite:
                self._prerequisite = None
            else:
                self._states.pop(target_id, None)
        self._notify(target_id, None, prerequisite)

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """
        Register a listener called as listener(target_id, state, prerequisite).

        A state of None means the entry was removed.

        Returns:
            Function that removes the listener
        """
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, target_id: str, state: Optional[TaskState], prerequisite: bool) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(target_id, state, prerequisite)
            except Exception as e:
                logger.error(f"Task state listener failed for {target_id}: {e}", exc_info=True)


__all__ = ['TaskPhase', 'TaskState', 'TaskStateStore', 'StateListener']
