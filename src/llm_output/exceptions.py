"""
Exceptions for the LLM output normalization layer.

Model flakiness never raises: extraction, recovery and schema failures are
reported as tagged stage results. Only malformed requests surface.
"""


class NormalizationError(Exception):
    """Base exception for normalization errors."""
    pass


class CallerInputError(NormalizationError):
    """
    Raised when the request itself is malformed.

    Missing topic, non-positive or oversized count, unknown schema, or an
    answer disclosure the caller is not authorized for. Carries the HTTP
    status the API layer should answer with.
    """

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
