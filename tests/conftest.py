"""Shared fixtures for realuser tests."""

import pytest

from realuser.errors import AttributeUnavailable
from realuser.models import Attribute, ErrorKind
from realuser.reader import ProcessAttributeReader


class FakeSource:
    """In-memory attribute source backed by two dicts.

    Missing pids raise NOT_FOUND. Exception values are raised as-is.
    """

    def __init__(self, owners=None, parents=None):
        self.owners = dict(owners or {})
        self.parents = dict(parents or {})
        self.calls: list[tuple[str, int]] = []

    def owner(self, pid: int) -> int:
        self.calls.append(("owner", pid))
        return self._get(self.owners, pid, Attribute.OWNER)

    def parent(self, pid: int) -> int:
        self.calls.append(("parent", pid))
        return self._get(self.parents, pid, Attribute.PARENT)

    def count(self, kind: str, pid: int) -> int:
        return self.calls.count((kind, pid))

    @staticmethod
    def _get(table, pid, attribute):
        if pid not in table:
            raise AttributeUnavailable(pid, attribute, ErrorKind.NOT_FOUND)
        value = table[pid]
        if isinstance(value, Exception):
            raise value
        return value


@pytest.fixture
def fake_reader():
    """Factory building a (source, reader) pair from owner and parent tables."""

    def build(owners=None, parents=None):
        source = FakeSource(owners, parents)
        return source, ProcessAttributeReader(source)

    return build
