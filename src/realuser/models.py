"""Data models for realuser."""

from dataclasses import dataclass
from enum import Enum

# The init/reaper process. Ancestry walks stop below it.
ROOT_PID = 1


class Attribute(Enum):
    """Process attributes read by the attribute reader."""

    OWNER = "owner"
    PARENT = "parent"


class ErrorKind(Enum):
    """Why a process attribute could not be read."""

    NOT_FOUND = "not_found"
    PERMISSION_DENIED = "permission_denied"
    MALFORMED = "malformed"
    UNAVAILABLE = "unavailable"


@dataclass(slots=True, frozen=True)
class ByPid:
    """Resolve a bare process id. Always performs deep resolution."""

    pid: int


@dataclass(slots=True, frozen=True)
class ByOptions:
    """Resolve with explicit options.

    ``pid=None`` means the calling process. ``deep=False`` selects shallow
    resolution.
    """

    pid: int | None = None
    deep: bool = False


ResolutionRequest = ByPid | ByOptions
