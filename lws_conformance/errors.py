"""Exceptions raised by the conformance harness.

Errors derived from ``ConformanceError`` that originate outside of test bodies
are fatal to the run. ``AssertionFailure``, ``ImplementationNotFound`` and
``Inapplicable`` are raised inside the boundary of a single test and only ever
surface as test results.
"""


class ConformanceError(Exception):
    """Base class for all harness errors."""


class ConfigLoadError(ConformanceError):
    """Raised when the run configuration cannot be read or validated."""


class ManifestError(ConformanceError):
    """Raised when a test manifest cannot be read or parsed."""


class HealthCheckError(ConformanceError):
    """Raised when an externally managed subject fails its health check."""


class SubjectLaunchError(ConformanceError):
    """Raised when the subject process cannot be spawned."""


class StartupTimeout(ConformanceError):
    """Raised when a managed subject does not become healthy in time."""


class ReporterError(ConformanceError):
    """Raised when a report sink fails to record or write its report."""


class ImplementationNotFound(ConformanceError):
    """Raised when a test has no registered assertion."""


class AssertionFailure(ConformanceError):
    """Raised by an assertion body when the subject does not conform."""


class Inapplicable(ConformanceError):
    """Raised by an assertion body when the requirement does not apply."""
