"""
Exceptions raised by compressed-shell components.

Only validation and oracle failures are exceptions. Denials are ordinary
decisions and spawn failures become synthetic execution results.
"""


class CompressedShellError(Exception):
    """Base exception for all compressed-shell errors."""

    pass


class ValidationError(CompressedShellError):
    """Raised when a required field is missing or blank."""

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"{field} is required")


class OracleError(CompressedShellError):
    """Raised when the summarization oracle fails."""

    pass


class OracleTimeoutError(OracleError):
    """Raised when the summarization oracle exceeds its time budget."""

    def __init__(self, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(f"timed out after {timeout:g}s")
