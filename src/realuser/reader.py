"""Cached process attribute reader."""

import logging
import os
import threading
from collections.abc import Callable

from realuser.config import Settings
from realuser.errors import AttributeUnavailable
from realuser.models import Attribute, ErrorKind
from realuser.sources import AttributeSource, default_source

logger = logging.getLogger(__name__)


class ProcessAttributeReader:
    """
    Reads a process's real uid and parent pid, caching each independently.

    Every cache entry is written once and never overwritten, unknown (``None``)
    results included, so repeated lookups for a pid always return the first
    observed answer. A recycled pid is not detected; call ``clear()`` or build
    a new reader when fresh answers are needed.
    """

    def __init__(self, source: AttributeSource | None = None, settings: Settings | None = None) -> None:
        """
        Initialize the reader.

        Args:
            source: Backend to query. Defaults to the one chosen by ``settings``.
            settings: Used only to pick the default source.
        """
        if source is None:
            source = default_source(settings or Settings.from_env())
        self._source = source
        self._lock = threading.Lock()
        self._caches: dict[Attribute, dict[int, int | None]] = {
            Attribute.OWNER: {},
            Attribute.PARENT: {},
        }
        self._failures: dict[tuple[int, Attribute], AttributeUnavailable] = {}

    @property
    def source(self) -> AttributeSource:
        return self._source

    def owner_of(self, pid: int | None = None) -> int | None:
        """Real uid of ``pid`` (default: this process), or None if unknown."""
        return self._lookup(Attribute.OWNER, pid, self._source.owner)

    def parent_of(self, pid: int | None = None) -> int | None:
        """Parent pid of ``pid`` (default: this process), or None if unknown."""
        return self._lookup(Attribute.PARENT, pid, self._source.parent)

    def failure(self, pid: int, attribute: Attribute) -> AttributeUnavailable | None:
        """Return why a cached lookup came back unknown, if it did."""
        with self._lock:
            return self._failures.get((pid, attribute))

    def clear(self) -> None:
        """Drop all cached attributes and recorded failures."""
        with self._lock:
            for cache in self._caches.values():
                cache.clear()
            self._failures.clear()

    def _lookup(
        self,
        attribute: Attribute,
        pid: int | None,
        read: Callable[[int], int],
    ) -> int | None:
        if pid is None:
            pid = os.getpid()

        cache = self._caches[attribute]
        with self._lock:
            if pid in cache:
                return cache[pid]

        # The OS read happens outside the lock
        failure: AttributeUnavailable | None = None
        try:
            value: int | None = read(pid)
        except AttributeUnavailable as exc:
            failure = exc
            value = None
        except OSError as exc:
            failure = AttributeUnavailable(pid, attribute, ErrorKind.UNAVAILABLE, str(exc))
            value = None

        with self._lock:
            # First write wins
            if pid in cache:
                return cache[pid]
            cache[pid] = value
            if failure is not None:
                self._failures[(pid, attribute)] = failure

        if failure is not None:
            logger.debug("%s lookup for pid %d failed: %s", attribute.value, pid, failure.kind.value)
        return value
