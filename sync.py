"""Shared-read / exclusive-write lock guarding the simulation world."""

from contextlib import contextmanager
import threading


class ReadWriteLock:
    """
    Many concurrent readers or one writer.

    Writers take priority: once a writer is waiting, new readers wait too,
    so a steady stream of snapshot readers cannot starve the stepping loop.
    Not reentrant.
    """

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    def acquire_read(self) -> None:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1

    def release_read(self) -> None:
        with self._cond:
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_write(self) -> None:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True

    def release_write(self) -> None:
        with self._cond:
            self._writer = False
            self._cond.notify_all()

    @contextmanager
    def read_locked(self):
        """Context manager holding the lock in shared mode."""
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write_locked(self):
        """Context manager holding the lock exclusively."""
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()
