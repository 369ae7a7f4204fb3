import threading
from contextlib import contextmanager


class KeyedLock:
    """One mutex per key, created on first use.

    Entries are reference counted and dropped once no thread holds or waits on
    them, so the table only grows with the number of keys in flight.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: dict = {}

    @contextmanager
    def hold(self, key):
        with self._guard:
            entry = self._locks.get(key)
            if entry is None:
                entry = [threading.Lock(), 0]
                self._locks[key] = entry
            entry[1] += 1
        lock = entry[0]
        lock.acquire()
        try:
            yield
        finally:
            lock.release()
            with self._guard:
                entry[1] -= 1
                if entry[1] == 0:
                    self._locks.pop(key, None)

    def __len__(self):
        with self._guard:
            return len(self._locks)


inventory_locks = KeyedLock()
