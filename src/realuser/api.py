"""Entry point: resolve the real owner of a process."""

import os
import threading
from collections.abc import Mapping
from typing import Any

from realuser.config import Settings
from realuser.errors import InvalidRequest
from realuser.models import ByOptions, ByPid, ResolutionRequest
from realuser.reader import ProcessAttributeReader
from realuser.resolver import AncestryResolver

_OPTION_KEYS = frozenset({"pid", "deep"})


def _check_pid(pid: Any) -> int:
    # bool is an int subclass but never a pid
    if isinstance(pid, bool) or not isinstance(pid, int):
        raise InvalidRequest(f"pid must be an int, got {type(pid).__name__}")
    if pid <= 0:
        raise InvalidRequest(f"pid must be positive, got {pid}")
    return pid


def coerce_request(request: Any = None) -> ResolutionRequest:
    """
    Normalize user input into a ``ByPid`` or ``ByOptions`` request.

    Accepts None (this process, deep), an int, a request object, or a
    mapping with only the keys ``pid`` and ``deep``.

    Raises:
        InvalidRequest: For any other shape or invalid values.
    """
    if request is None:
        return ByPid(os.getpid())
    if isinstance(request, ByPid):
        return ByPid(_check_pid(request.pid))
    if isinstance(request, ByOptions):
        options = request
    elif isinstance(request, Mapping):
        unknown = set(request) - _OPTION_KEYS
        if unknown:
            raise InvalidRequest(f"unrecognized option(s): {', '.join(sorted(map(str, unknown)))}")
        options = ByOptions(pid=request.get("pid"), deep=request.get("deep", False))
    elif isinstance(request, int) and not isinstance(request, bool):
        return ByPid(_check_pid(request))
    else:
        raise InvalidRequest(f"cannot resolve a request of type {type(request).__name__}")

    if options.deep is not None and not isinstance(options.deep, bool):
        raise InvalidRequest(f"deep must be a bool, got {type(options.deep).__name__}")
    pid = os.getpid() if options.pid is None else _check_pid(options.pid)
    return ByOptions(pid=pid, deep=bool(options.deep))


class RealUser:
    """
    Resolves the real owning uid of processes.

    Holds one attribute reader, so its caches are shared across every
    resolution made through this instance.
    """

    def __init__(
        self,
        reader: ProcessAttributeReader | None = None,
        settings: Settings | None = None,
    ) -> None:
        settings = settings or Settings.from_env()
        self._reader = reader or ProcessAttributeReader(settings=settings)
        self._resolver = AncestryResolver(self._reader, max_hops=settings.max_hops)

    @property
    def reader(self) -> ProcessAttributeReader:
        return self._reader

    @property
    def resolver(self) -> AncestryResolver:
        return self._resolver

    def resolve(self, request: Any = None) -> int | None:
        """
        Resolve the real uid for a request.

        A bare pid or ``ByPid`` resolves deep. ``ByOptions`` (or a mapping)
        resolves deep only when ``deep`` is true, otherwise shallow.

        Returns:
            The uid, or None if it could not be determined.

        Raises:
            InvalidRequest: If the request is malformed.
        """
        req = coerce_request(request)
        if isinstance(req, ByPid):
            return self._resolver.resolve_deep(req.pid)
        if req.deep:
            return self._resolver.resolve_deep(req.pid)
        return self._resolver.resolve_shallow(req.pid)

    def reset_caches(self) -> None:
        """Forget every cached owner and parent."""
        self._reader.clear()


_default: RealUser | None = None
_default_lock = threading.Lock()


def default() -> RealUser:
    """Return the process-wide resolver, creating it on first use."""
    global _default
    with _default_lock:
        if _default is None:
            _default = RealUser()
        return _default


def resolve(request: Any = None) -> int | None:
    """Resolve a request with the process-wide resolver."""
    return default().resolve(request)


# Same entry point name as the original realuser library
ruid = resolve


def reset_caches() -> None:
    """Clear the process-wide resolver's caches."""
    default().reset_caches()
