"""Tests for the cached ProcessAttributeReader."""

import os
import threading

from realuser.errors import AttributeUnavailable
from realuser.models import Attribute, ErrorKind
from realuser.reader import ProcessAttributeReader


class TestOwnerAndParent:
    """Tests for plain lookups."""

    def test_lookups(self, fake_reader):
        source, reader = fake_reader(owners={10: 1000}, parents={10: 5})
        assert reader.owner_of(10) == 1000
        assert reader.parent_of(10) == 5

    def test_root_uid_is_a_valid_owner(self, fake_reader):
        """Test uid 0 is returned as-is and not confused with unknown."""
        source, reader = fake_reader(owners={10: 0})
        assert reader.owner_of(10) == 0
        assert reader.owner_of(10) == 0
        assert source.count("owner", 10) == 1

    def test_defaults_to_current_process(self, fake_reader):
        """Test pid=None reads the calling process."""
        me = os.getpid()
        source, reader = fake_reader(owners={me: 42}, parents={me: 7})
        assert reader.owner_of() == 42
        assert reader.parent_of() == 7

    def test_source_property(self, fake_reader):
        source, reader = fake_reader()
        assert reader.source is source


class TestCaching:
    """Tests for the write-once caches."""

    def test_owner_is_frozen_after_first_read(self, fake_reader):
        """Test later OS changes are not observed."""
        source, reader = fake_reader(owners={10: 1000})
        assert reader.owner_of(10) == 1000
        source.owners[10] = 2000
        assert reader.owner_of(10) == 1000
        assert source.count("owner", 10) == 1

    def test_unknown_is_cached(self, fake_reader):
        """Test a failed lookup is not retried even once the pid appears."""
        source, reader = fake_reader()
        assert reader.parent_of(10) is None
        source.parents[10] = 5
        assert reader.parent_of(10) is None
        assert source.count("parent", 10) == 1

    def test_caches_are_independent(self, fake_reader):
        """Test the owner lookup does not populate the parent cache."""
        source, reader = fake_reader(owners={10: 1000}, parents={10: 5})
        reader.owner_of(10)
        assert source.count("parent", 10) == 0
        reader.parent_of(10)
        assert source.count("parent", 10) == 1

    def test_failure_is_isolated_per_attribute(self, fake_reader):
        """Test a failing parent read leaves the owner readable."""
        source, reader = fake_reader(owners={10: 1000})
        assert reader.parent_of(10) is None
        assert reader.owner_of(10) == 1000

    def test_clear(self, fake_reader):
        source, reader = fake_reader(owners={10: 1000})
        reader.owner_of(10)
        source.owners[10] = 2000
        reader.clear()
        assert reader.owner_of(10) == 2000
        assert source.count("owner", 10) == 2

    def test_instances_do_not_share_caches(self, fake_reader):
        source_a, reader_a = fake_reader(owners={10: 1})
        source_b, reader_b = fake_reader(owners={10: 2})
        assert reader_a.owner_of(10) == 1
        assert reader_b.owner_of(10) == 2


class TestFailures:
    """Tests for failure recording."""

    def test_failure_cause_is_recorded(self, fake_reader):
        error = AttributeUnavailable(10, Attribute.OWNER, ErrorKind.PERMISSION_DENIED)
        source, reader = fake_reader(owners={10: error})
        assert reader.owner_of(10) is None
        assert reader.failure(10, Attribute.OWNER) is error
        assert reader.failure(10, Attribute.PARENT) is None

    def test_stray_os_error_becomes_unknown(self, fake_reader):
        """Test an OSError escaping a source is treated as UNAVAILABLE."""
        source, reader = fake_reader(parents={10: OSError("io")})
        assert reader.parent_of(10) is None
        failure = reader.failure(10, Attribute.PARENT)
        assert failure.kind is ErrorKind.UNAVAILABLE

    def test_success_records_no_failure(self, fake_reader):
        source, reader = fake_reader(owners={10: 1000})
        reader.owner_of(10)
        assert reader.failure(10, Attribute.OWNER) is None

    def test_clear_drops_failures(self, fake_reader):
        source, reader = fake_reader()
        reader.owner_of(10)
        reader.clear()
        assert reader.failure(10, Attribute.OWNER) is None

    def test_failures_logged_at_debug(self, fake_reader, caplog):
        source, reader = fake_reader()
        with caplog.at_level("DEBUG", logger="realuser"):
            reader.owner_of(10)
        assert "not_found" in caplog.text


class _SlowSource:
    """Source that returns a different answer on every call."""

    def __init__(self):
        self._lock = threading.Lock()
        self._counter = 0
        self.barrier = threading.Barrier(8)

    def owner(self, pid):
        self.barrier.wait(timeout=5.0)
        with self._lock:
            self._counter += 1
            return self._counter

    def parent(self, pid):
        return 1


def test_concurrent_lookups_agree():
    """Test racing threads all observe the single first-written value."""
    reader = ProcessAttributeReader(_SlowSource())
    results = []
    results_lock = threading.Lock()

    def worker():
        value = reader.owner_of(10)
        with results_lock:
            results.append(value)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=5.0)

    assert len(results) == 8
    assert len(set(results)) == 1
    assert reader.owner_of(10) == results[0]
