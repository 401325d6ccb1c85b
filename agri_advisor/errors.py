"""
Error taxonomy for the /ask flow.

Every condition the orchestrator can end in is an AdvisoryError subclass
carrying the HTTP status and the stable message shown to the caller.
"""


class AdvisoryError(Exception):
    status_code = 500
    message = "Unable to process your request. Please try again."

    def __init__(self, detail: str = ""):
        super().__init__(detail or self.message)
        self.detail = detail


class InvalidInput(AdvisoryError):
    status_code = 400
    message = "Both location and query are required"


class LocationNotFound(AdvisoryError):
    status_code = 400
    message = "Location not found. Please try a different location."


class AuthFailure(AdvisoryError):
    status_code = 500
    message = "API authentication failed. Please check your API keys."


class RateLimited(AdvisoryError):
    status_code = 500
    message = "API rate limit exceeded. Please try again later."


class UpstreamFailure(AdvisoryError):
    status_code = 500
    message = "Unable to process your request. Please try again."


class RecordValidationError(ValueError):
    """An interaction record failed its field constraints before insert."""
