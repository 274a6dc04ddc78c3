"""OS backends that read a process's owner and parent.

Sources raise ``AttributeUnavailable`` with a classified ``ErrorKind`` on any
failure. Caching and the mapping to unknown (``None``) live in the reader.
"""

import os
import re
import sys
from typing import Protocol

import psutil

from realuser.config import Settings
from realuser.errors import AttributeUnavailable, ConfigurationError
from realuser.models import Attribute, ErrorKind

_PPID_RE = re.compile(r"^PPid:\s+(\d+)", re.MULTILINE | re.ASCII)
# Real, effective, saved set and filesystem uids
_UID_RE = re.compile(r"^Uid:\s+(\d+)", re.MULTILINE | re.ASCII)


class AttributeSource(Protocol):
    """Anything that can read a process's real uid and parent pid."""

    def owner(self, pid: int) -> int: ...

    def parent(self, pid: int) -> int: ...


class ProcfsSource:
    """Reads ``<proc_root>/<pid>/status`` records."""

    def __init__(self, proc_root: str = "/proc") -> None:
        self.proc_root = proc_root

    def owner(self, pid: int) -> int:
        return self._field(pid, Attribute.OWNER, _UID_RE)

    def parent(self, pid: int) -> int:
        return self._field(pid, Attribute.PARENT, _PPID_RE)

    def _field(self, pid: int, attribute: Attribute, pattern: re.Pattern[str]) -> int:
        status = self._read_status(pid, attribute)
        match = pattern.search(status)
        if match is None:
            raise AttributeUnavailable(pid, attribute, ErrorKind.MALFORMED, "field missing from status")
        return int(match.group(1))

    def _read_status(self, pid: int, attribute: Attribute) -> str:
        path = os.path.join(self.proc_root, str(pid), "status")
        try:
            # Name: holds raw bytes of the process name
            with open(path, encoding="utf-8", errors="surrogateescape") as fh:
                return fh.read()
        except (FileNotFoundError, ProcessLookupError) as exc:
            raise AttributeUnavailable(pid, attribute, ErrorKind.NOT_FOUND, str(exc)) from exc
        except PermissionError as exc:
            raise AttributeUnavailable(pid, attribute, ErrorKind.PERMISSION_DENIED, str(exc)) from exc
        except OSError as exc:
            raise AttributeUnavailable(pid, attribute, ErrorKind.UNAVAILABLE, str(exc)) from exc


class PsutilSource:
    """Reads process attributes through psutil."""

    def owner(self, pid: int) -> int:
        try:
            return psutil.Process(pid).uids().real
        except (psutil.Error, AttributeError, OSError, ValueError) as exc:
            # AttributeError: Process.uids() does not exist on Windows
            raise _classify(pid, Attribute.OWNER, exc) from exc

    def parent(self, pid: int) -> int:
        try:
            return psutil.Process(pid).ppid()
        except (psutil.Error, OSError, ValueError) as exc:
            raise _classify(pid, Attribute.PARENT, exc) from exc


def _classify(pid: int, attribute: Attribute, exc: Exception) -> AttributeUnavailable:
    if isinstance(exc, (psutil.NoSuchProcess, ValueError)):
        # Covers ZombieProcess and pids psutil rejects outright
        kind = ErrorKind.NOT_FOUND
    elif isinstance(exc, psutil.AccessDenied):
        kind = ErrorKind.PERMISSION_DENIED
    else:
        kind = ErrorKind.UNAVAILABLE
    return AttributeUnavailable(pid, attribute, kind, str(exc))


def default_source(settings: Settings) -> AttributeSource:
    """Pick the attribute source named by ``settings.backend``."""
    if settings.backend == "procfs":
        return ProcfsSource(settings.proc_root)
    if settings.backend == "psutil":
        return PsutilSource()
    if settings.backend == "auto":
        if sys.platform.startswith("linux") and os.path.isdir(settings.proc_root):
            return ProcfsSource(settings.proc_root)
        return PsutilSource()
    raise ConfigurationError(f"unknown backend {settings.backend!r}")
