"""Error taxonomy shared by the validator, the relay and the HTTP layer."""
from __future__ import annotations


class BridgeError(Exception):
    """Base class. ``status_code`` is what the HTTP layer answers with."""

    status_code = 500
    error = "Internal server error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(BridgeError):
    """Missing or malformed signup input. User-correctable."""

    status_code = 400
    error = "Validation Error"


class TransportError(BridgeError):
    """Browserless could not be reached or did not answer with JSON."""

    error = "Transport error"


class ScriptRejected(BridgeError):
    """Browserless answered with a top-level error list for the script."""

    error = "Automation script rejected"


class AutomationStepFailure(BridgeError):
    """One or more script steps did not execute."""

    error = "Automation step failure"

    def __init__(self, failed_steps: list[str]) -> None:
        super().__init__(f"Form submission steps failed: {', '.join(failed_steps)}")
        self.failed_steps = failed_steps


class HeuristicMismatch(BridgeError):
    """Every step ran but the resulting page did not look like a success page."""

    error = "Form submission failed"

    def __init__(self, message: str, data: dict | None = None) -> None:
        super().__init__(message)
        self.data = data


class SubmissionFailed(BridgeError):
    """Raised by the router when the relay reports ``success: false``."""

    error = "Form submission failed"
