"""Ancestry walking strategies for finding a process's real owner."""

import logging
from collections.abc import Iterator

from realuser.config import DEFAULT_MAX_HOPS
from realuser.errors import LoopGuardExceeded
from realuser.models import ROOT_PID
from realuser.reader import ProcessAttributeReader

logger = logging.getLogger(__name__)


class AncestryResolver:
    """
    Resolves a representative uid for a process by climbing its ancestors.

    Two policies are supported:

    - deep: climb to the topmost ancestor below init and use its owner.
    - shallow: climb while the owner stays the same and stop at the first
      ancestor whose owner differs.

    Walks are iterative and bounded by ``max_hops``. A revisited pid or an
    exhausted hop budget makes the result unknown (``None``).
    """

    def __init__(self, reader: ProcessAttributeReader, max_hops: int = DEFAULT_MAX_HOPS) -> None:
        self._reader = reader
        self._max_hops = max(1, max_hops)

    @property
    def reader(self) -> ProcessAttributeReader:
        return self._reader

    @property
    def max_hops(self) -> int:
        return self._max_hops

    def ancestry(self, pid: int) -> Iterator[int]:
        """
        Yield ``pid`` and then each ancestor below init, nearest first.

        A node's parent is only read when the next item is requested.

        Raises:
            LoopGuardExceeded: On a cycle, or when the chain is longer than
                ``max_hops``.
        """
        seen: set[int] = set()
        current = pid
        while True:
            if current in seen:
                raise LoopGuardExceeded(pid, len(seen), f"pid {current} revisited")
            if len(seen) >= self._max_hops:
                raise LoopGuardExceeded(pid, len(seen), "hop limit reached")
            seen.add(current)
            yield current

            parent = self._reader.parent_of(current)
            if parent is None or parent <= ROOT_PID:
                return
            current = parent

    def resolve_deep(self, pid: int) -> int | None:
        """Owner of the topmost ancestor of ``pid`` whose parent is init or absent."""
        try:
            top = pid
            for top in self.ancestry(pid):
                pass
        except LoopGuardExceeded as exc:
            logger.warning("deep resolution gave up: %s", exc)
            return None
        return self._reader.owner_of(top)

    def resolve_shallow(self, pid: int, parent_owner: int | None = None) -> int | None:
        """
        Owner of the first ancestor whose owner differs from the one below it.

        Args:
            pid: Process to start from.
            parent_owner: Owner to compare the first node against. None
                means no comparison yet.

        Returns:
            The first differing owner, the last owner when the chain ends
            first, or None when an owner is unknown.
        """
        expected = parent_owner
        owner: int | None = None
        try:
            for node in self.ancestry(pid):
                owner = self._reader.owner_of(node)
                if owner is None:
                    return None
                if expected is not None and owner != expected:
                    return owner
                expected = owner
        except LoopGuardExceeded as exc:
            logger.warning("shallow resolution gave up: %s", exc)
            return None
        return owner
