from .automation import AutomationResponse, StepReport
from .signup import SignupPayload, SignupRequest, SubmissionOutcome

__all__ = [
    "AutomationResponse",
    "StepReport",
    "SignupPayload",
    "SignupRequest",
    "SubmissionOutcome",
]
