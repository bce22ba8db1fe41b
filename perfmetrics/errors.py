"""Exception hierarchy for the publish pipeline.

Fatal errors derive from :class:`PerfMetricsError` and propagate unchanged to
the CLI, which logs them and exits non-zero. Unmapped data keys are not
errors and have no exception type.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class PerfMetricsError(Exception):
    """Base class for all errors raised by perfmetrics."""


class ConfigurationError(PerfMetricsError):
    """A required session setting could not be resolved.

    Raised when region or profile is absent from both the configuration
    document and the CLI/environment fallbacks, or when an AWS session cannot
    be built from the resolved values.
    """


class InputReadError(PerfMetricsError):
    """The configuration or data document is missing, unreadable or malformed.

    Attributes
    ----------
    path: Optional[Path]
        Document that failed to load, when known.
    """

    def __init__(self, message: str, path: Optional[Path] = None) -> None:
        super().__init__(message)
        self.path = path


class ConfirmationReadError(PerfMetricsError):
    """The interactive input stream failed while awaiting confirmation.

    The confirmation gate converts this condition into a decline; it is never
    raised past the gate.
    """


class PublishError(PerfMetricsError):
    """The remote PutMetricData call failed."""
