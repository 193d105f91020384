import asyncio
from collections import defaultdict
from contextlib import asynccontextmanager


class EntityLocks:
    """
    In-process single-writer registry: one asyncio.Lock per entity id.

    Multi-key holds acquire in sorted order so two callers locking
    overlapping sets of products cannot deadlock. Locks are dropped once
    nobody holds or waits on them.
    """

    def __init__(self, name: str):
        self.name = name
        self._locks: dict = {}
        self._refs: defaultdict = defaultdict(int)

    def is_locked(self, key) -> bool:
        lock = self._locks.get(key)
        return lock is not None and lock.locked()

    @asynccontextmanager
    async def hold(self, *keys):
        ordered = sorted(set(keys))
        for key in ordered:
            self._refs[key] += 1
        locks = [self._locks.setdefault(key, asyncio.Lock()) for key in ordered]
        acquired = []
        try:
            for lock in locks:
                await lock.acquire()
                acquired.append(lock)
            yield
        finally:
            for lock in reversed(acquired):
                lock.release()
            for key in ordered:
                self._refs[key] -= 1
                if not self._refs[key]:
                    del self._refs[key]
                    self._locks.pop(key, None)
