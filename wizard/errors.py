"""
Wizard Exceptions

Error taxonomy for the registration workflow. Validation and staging errors
are recoverable and stay inside the session; submission errors are surfaced
to the user as a single terminal message.
"""

GENERIC_SUBMISSION_MESSAGE = "There was an error processing your request. Please try again."


class WizardError(Exception):
    """Base exception for all registration wizard errors."""
    pass


class ValidationError(WizardError):
    """
    Raised when one or more fields fail their rules.

    `errors` maps field name to message in rule-declaration order, so the
    caller can show the whole list at once.
    """
    def __init__(self, errors: dict[str, str]):
        self.errors = dict(errors)
        lines = "; ".join(self.errors.values())
        super().__init__(f"{len(self.errors)} field(s) need attention: {lines}")


class StagingError(WizardError):
    """Raised when a file could not be converted into its transportable form."""
    def __init__(self, message: str, requirement_id: str = None, filename: str = None):
        self.requirement_id = requirement_id
        self.filename = filename
        super().__init__(message)


class AgreementRequiredError(WizardError):
    """Raised when submission is attempted without agreeing to the terms."""
    def __init__(self, message: str = "You must agree to the terms and conditions before submitting your application."):
        super().__init__(message)


class SubmissionError(WizardError):
    """
    Raised when the registry rejects or fails a create/update call.

    The message is the server-provided one when available, otherwise the
    generic failure text. The session keeps its data for a retry.
    """
    def __init__(self, message: str = GENERIC_SUBMISSION_MESSAGE, status_code: int = None):
        self.status_code = status_code
        super().__init__(message)


class SubmissionInProgressError(SubmissionError):
    """Raised when submit() is called while a previous submit is still pending."""
    def __init__(self):
        super().__init__("A submission is already in progress.")


class HydrationError(WizardError):
    """Raised when an existing business record could not be loaded for editing."""
    def __init__(self, message: str, business_id: str = None):
        self.business_id = business_id
        super().__init__(message)


class SessionNotReadyError(WizardError):
    """Raised when a field edit arrives before edit-mode hydration has finished."""
    pass
