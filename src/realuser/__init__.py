"""realuser - find the real owning user of a process from its ancestry."""

from realuser.api import RealUser, coerce_request, reset_caches, resolve, ruid
from realuser.config import Settings
from realuser.errors import (
    AttributeUnavailable,
    ConfigurationError,
    InvalidRequest,
    LoopGuardExceeded,
    RealUserError,
)
from realuser.logging_config import configure_logging
from realuser.models import ROOT_PID, Attribute, ByOptions, ByPid, ErrorKind, ResolutionRequest
from realuser.reader import ProcessAttributeReader
from realuser.resolver import AncestryResolver
from realuser.sources import ProcfsSource, PsutilSource

__all__ = [
    "ROOT_PID",
    "AncestryResolver",
    "Attribute",
    "AttributeUnavailable",
    "ByOptions",
    "ByPid",
    "ConfigurationError",
    "ErrorKind",
    "InvalidRequest",
    "LoopGuardExceeded",
    "ProcessAttributeReader",
    "ProcfsSource",
    "PsutilSource",
    "RealUser",
    "RealUserError",
    "ResolutionRequest",
    "Settings",
    "configure_logging",
    "coerce_request",
    "reset_caches",
    "resolve",
    "ruid",
]
