"""Hand callables over to the Qt main thread."""

import logging
from collections.abc import Callable
from typing import Protocol

from PySide6.QtCore import QObject, Qt, Signal, Slot

logger = logging.getLogger(__name__)


class Dispatcher(Protocol):
    """Posts callables to the UI-update context."""

    def post(self, fn: Callable[[], None]) -> None: ...


class UiDispatcher(QObject):
    """Run callables later on the thread that owns this object.

    Create it on the Qt main thread. post() may be called from any thread;
    the callable is queued and runs on the next event loop iteration, never
    inline in the caller.

    Example:
        dispatcher = UiDispatcher()
        dispatcher.post(lambda: label.setText("Joined"))
    """

    _invoke = Signal(object)

    def __init__(self, parent: QObject | None = None) -> None:
        """Initialize the dispatcher.

        Args:
            parent: Optional parent QObject.
        """
        super().__init__(parent)
        self._invoke.connect(self._run, Qt.ConnectionType.QueuedConnection)

    def post(self, fn: Callable[[], None]) -> None:
        """Queue a callable for the owner thread.

        Args:
            fn: Callable taking no arguments.
        """
        self._invoke.emit(fn)

    @Slot(object)
    def _run(self, fn: Callable[[], None]) -> None:
        try:
            fn()
        except Exception:
            logger.exception("Error in UI callback")
