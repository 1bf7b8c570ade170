"""
CacheProbe - Fault taxonomy.

Every failure the probe raises is a structured fault object:
- Stable machine-readable code
- Human-readable message
- Severity level
- Domain classification

Probe faults propagate straight to the calling test. Nothing here is
retried or masked.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional


# ============================================================================
# Severity & Domain
# ============================================================================

class Severity(str, Enum):
    """Fault severity levels."""
    INFO = "info"
    WARN = "warn"
    ERROR = "error"
    FATAL = "fatal"


class FaultDomain:
    """
    Fault domains (taxonomy).

    Identifies the functional area where a fault occurred.
    """

    def __init__(self, name: str, description: str = ""):
        self.name = name
        self.value = name
        self.description = description

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"FaultDomain(name='{self.name}')"

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, FaultDomain):
            return self.name == other.name
        return str(self) == str(other)

    def __hash__(self) -> int:
        return hash(self.name)


FaultDomain.CONFIG = FaultDomain("config", "Configuration errors")
FaultDomain.ROUTING = FaultDomain("routing", "Route matching errors")
FaultDomain.PROBE = FaultDomain("probe", "Cache observation harness")


DOMAIN_DEFAULTS = {
    FaultDomain.CONFIG: {"severity": Severity.FATAL, "retryable": False},
    FaultDomain.ROUTING: {"severity": Severity.ERROR, "retryable": False},
    FaultDomain.PROBE: {"severity": Severity.ERROR, "retryable": False},
}


# ============================================================================
# Fault - Base Class
# ============================================================================

class Fault(Exception):
    """
    Base fault class.

    Attributes:
        code: Stable machine-readable identifier (e.g., "NO_REQUEST_IN_BLOCK")
        message: Human-readable summary
        severity: Fault severity
        domain: Fault domain
        retryable: Whether this fault can be retried
        metadata: Additional context data
    """

    def __init__(
        self,
        code: str | None = None,
        message: str | None = None,
        *,
        domain: FaultDomain | None = None,
        severity: Optional[Severity] = None,
        retryable: Optional[bool] = None,
        metadata: Optional[dict[str, Any]] = None,
    ):
        self.code = code if code is not None else getattr(self, "code", None)
        self.message = message if message is not None else getattr(self, "message", None)
        self.domain = domain if domain is not None else getattr(self, "domain", None)

        if self.code is None or self.message is None or self.domain is None:
            raise TypeError(f"{self.__class__.__name__} missing required code, message, or domain")

        super().__init__(self.message)

        defaults = DOMAIN_DEFAULTS.get(self.domain, {"severity": Severity.ERROR, "retryable": False})
        self.severity = severity or defaults["severity"]
        self.retryable = retryable if retryable is not None else defaults["retryable"]
        self.metadata = metadata or {}

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(code={self.code!r}, domain={self.domain.value}, "
            f"severity={self.severity.value})"
        )


# ============================================================================
# Probe faults
# ============================================================================

class ProbeFault(Fault):
    """Base class for all cache probe faults."""

    def __init__(
        self,
        code: str,
        message: str,
        *,
        severity: Severity = Severity.ERROR,
        metadata: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            code=code,
            message=message,
            domain=FaultDomain.PROBE,
            severity=severity,
            retryable=False,
            metadata=metadata,
        )


class ProbeSetupFault(ProbeFault):
    """The assertion holder lacks a collaborator it needs (probe context, client)."""

    def __init__(self, holder: str, missing: str):
        super().__init__(
            code="PROBE_NOT_CONFIGURED",
            message=f"{holder} has no {missing}",
            metadata={"holder": holder, "missing": missing},
        )
        self.missing = missing


class NoRequestInBlockFault(ProbeFault):
    """The block ran but no request reached a controller."""

    def __init__(self, assertion: str = ""):
        super().__init__(
            code="NO_REQUEST_IN_BLOCK",
            message="no request was sent while executing block",
            metadata={"assertion": assertion},
        )


class MissingBlockFault(ProbeFault):
    """An assertion that cannot infer its own block was called without one."""

    def __init__(self, assertion: str):
        super().__init__(
            code="BLOCK_REQUIRED",
            message=f"{assertion} requires a block that triggers the cache operation",
            metadata={"assertion": assertion},
        )


class NoControllerDefinedFault(ProbeFault):
    """An integration-mode target does not name its controller."""

    def __init__(self, target: Any):
        super().__init__(
            code="NO_CONTROLLER_DEFINED",
            message=f"no controller given in option {target!r} in integration test",
            severity=Severity.FATAL,
            metadata={"target": target},
        )
        self.target = target


class CacheAssertionFault(ProbeFault, AssertionError):
    """
    A target was not written, deleted, cached or expired as expected.

    Also an ``AssertionError`` so test runners report it as a failure
    rather than an error.
    """

    def __init__(self, target: Any, expectation: str, key: Any = None):
        super().__init__(
            code="CACHE_EXPECTATION_FAILED",
            message=f"{target!r} was not {expectation} after executing block",
            metadata={"target": target, "key": key, "expectation": expectation},
        )
        self.target = target
        self.key = key
        self.expectation = expectation


class RoutingError(Fault):
    """No route recognizes a path, or no route can generate a URL."""

    def __init__(self, message: str, **metadata: Any):
        super().__init__(
            code="ROUTE_NOT_FOUND",
            message=message,
            domain=FaultDomain.ROUTING,
            metadata=metadata,
        )
