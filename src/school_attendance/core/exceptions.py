class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when the caller is not signed in."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when a record does not exist or is not visible to the caller."""


class ScanError(DomainError):
    """Base class for rejected QR scans."""


class InvalidQRCodeError(ScanError):
    """Malformed, tampered or unresolvable QR payload.

    The message never says which check failed.
    """

    def __init__(self, message: str = "Invalid or tampered QR code. Please contact administrator."):
        super().__init__(message)


class StudentNotFoundError(ScanError):
    def __init__(self, message: str = "Invalid QR code. Student not found."):
        super().__init__(message)


class NoActiveQuarterError(ScanError):
    def __init__(self, message: str = "No active quarter found"):
        super().__init__(message)


class AttendanceCompletedError(ScanError):
    def __init__(self, message: str = "Student has already completed attendance for today"):
        super().__init__(message)


class DuplicateScanError(ScanError):
    def __init__(self, message: str = "Scan already being recorded for this student. Please try again."):
        super().__init__(message)


class ScanProcessingError(Exception):
    """Infrastructure failure on the attendance-of-record path (not a domain error)."""
