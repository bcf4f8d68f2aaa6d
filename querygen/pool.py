"""A bounded token pool for limiting concurrent workers."""

from __future__ import annotations

import threading


class Pool:
    """Hands out at most ``size`` tokens at a time; a negative size disables the pool."""

    def __init__(self, size: int) -> None:
        self._capacity = size if size >= 0 else None
        self._issued = 0
        self._pending = 0
        self._cond = threading.Condition()

    def __enter__(self) -> "Pool":
        self.wait()
        return self

    def __exit__(self, *exc) -> None:
        self.done()

    def wait(self) -> None:
        """Block until a token is available and take it."""
        if self._capacity is None:
            return
        with self._cond:
            self._pending += 1
            self._cond.wait_for(lambda: self._issued < self._capacity)
            self._issued += 1

    def done(self) -> None:
        """Return a token."""
        if self._capacity is None:
            return
        with self._cond:
            if self._issued == 0:
                raise RuntimeError("pool token returned without being taken")
            self._issued -= 1
            self._pending -= 1
            self._cond.notify_all()

    def num(self) -> int:
        """Number of tokens currently handed out."""
        with self._cond:
            return self._issued

    def size(self) -> int:
        """Total number of tokens."""
        return self._capacity if self._capacity is not None else 0

    def wait_all(self) -> None:
        """Block until every requested token has been returned."""
        with self._cond:
            self._cond.wait_for(lambda: self._pending == 0)

    def async_wait_all(self) -> threading.Event:
        """Return an event that is set once every token has been returned."""
        event = threading.Event()

        def _watch() -> None:
            self.wait_all()
            event.set()

        threading.Thread(target=_watch, daemon=True).start()
        return event