"""
Exception hierarchy for the regex harness.

Every error carries a human-readable message, optional details and a context
mapping. Lower layers raise the specific subclasses below; each call boundary
adds one layer of context via ``raise ... from``.
"""

from typing import Any, Dict, Optional


class HarnessError(Exception):
    """Base exception for all harness failures."""

    def __init__(self, message: str, details: Optional[str] = None, **context: Any):
        self.message = message
        self.details = details
        self.context: Dict[str, Any] = dict(context)
        super().__init__(message)

    def __str__(self) -> str:
        text = self.message
        if self.details:
            text = f"{text} - {self.details}"
        if self.__cause__ is not None:
            text = f"{text}: {self.__cause__}"
        return text

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": type(self).__name__,
            "message": self.message,
            "details": self.details,
            "context": self.context,
        }


class GenerationError(HarnessError):
    """A pattern or word generator failed to produce its corpus."""


class TransformerExecutionError(HarnessError):
    """The batch transformer failed to start, failed to run, or broke the line protocol."""

    def __init__(self, message: str, details: Optional[str] = None, reason: str = "execution failed", **context: Any):
        self.reason = reason
        super().__init__(message, details, reason=reason, **context)


class ProcessStartError(HarnessError):
    """A matcher process could not be started."""


class ProcessExitError(HarnessError):
    """A matcher process exited with a non-zero status."""

    def __init__(self, message: str, returncode: int, stderr: str = "", details: Optional[str] = None, **context: Any):
        self.returncode = returncode
        self.stderr = stderr
        if details is None:
            details = stderr.strip() or None
        super().__init__(message, details, returncode=returncode, **context)


class FlowError(HarnessError):
    """Failure of a whole top-level flow (equivalence or benchmark)."""

    def __init__(self, flow: str, message: Optional[str] = None, **context: Any):
        self.flow = flow
        super().__init__(message or f"failed {flow} check", flow=flow, **context)
