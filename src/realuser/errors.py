"""Exception types for realuser."""

from realuser.models import Attribute, ErrorKind


class RealUserError(Exception):
    """Base class for all realuser errors."""


class AttributeUnavailable(RealUserError):
    """A process attribute could not be read from the OS.

    Raised by attribute sources only. The reader records it and reports the
    attribute as unknown (``None``) to its callers.
    """

    def __init__(self, pid: int, attribute: Attribute, kind: ErrorKind, detail: str = "") -> None:
        self.pid = pid
        self.attribute = attribute
        self.kind = kind
        self.detail = detail
        message = f"{attribute.value} of pid {pid} unavailable: {kind.value}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class InvalidRequest(RealUserError, ValueError):
    """A resolution request has an unrecognized shape or invalid values."""


class LoopGuardExceeded(RealUserError):
    """An ancestry walk revisited a pid or exceeded the hop limit."""

    def __init__(self, pid: int, hops: int, reason: str) -> None:
        self.pid = pid
        self.hops = hops
        self.reason = reason
        super().__init__(f"ancestry walk from pid {pid} aborted after {hops} hops: {reason}")


class ConfigurationError(RealUserError, ValueError):
    """Settings could not be parsed or name an unknown backend."""
