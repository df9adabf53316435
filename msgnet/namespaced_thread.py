"""Threads whose names nest under the name of the thread that started them."""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Generic, TypeVar

__all__ = ["NamespacedThread"]

_log = logging.getLogger(__name__)

T = TypeVar("T")


class NamespacedThread(Generic[T]):
    """Runs ``func`` in a new thread named ``<parent name>/<name>``.

    Used as a context manager, leaving the block waits for the thread.
    """

    def __init__(self, name: str, func: Callable[[], T]) -> None:
        parent = threading.current_thread().name or ""
        self.namespace = f"{parent}/{name}"
        self._result: Any = None
        self._error: BaseException | None = None
        self._thread: threading.Thread | None = threading.Thread(
            target=self._run, args=(func,), name=self.namespace
        )
        self._thread.start()

    def _run(self, func: Callable[[], T]) -> None:
        _log.debug("Thread [%s] spawned", self.namespace)
        try:
            self._result = func()
        except BaseException as error:  # re-raised in the joining thread
            self._error = error

    def join(self) -> T:
        """Wait for the thread to finish and return what it returned.

        Raises ``RuntimeError`` if the thread was already joined; an exception
        raised inside the thread is raised again here.
        """
        if self._thread is None:
            raise RuntimeError(f"Thread [{self.namespace}] already joined")
        _log.debug("Join thread [%s] ...", self.namespace)
        thread, self._thread = self._thread, None
        thread.join()
        _log.debug("Joined thread [%s]", self.namespace)
        if self._error is not None:
            error, self._error = self._error, None
            raise error
        result, self._result = self._result, None
        return result

    def try_join(self) -> T | None:
        """Join if not joined yet and return the result, otherwise ``None``."""
        if self._thread is not None:
            return self.join()
        return None

    def __enter__(self) -> NamespacedThread[T]:
        return self

    def __exit__(self, *args: Any) -> None:
        self.try_join()