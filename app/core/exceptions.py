"""Custom application exceptions."""


class AppException(Exception):
    """Base application exception."""

    def __init__(self, message: str, status_code: int = 500):
        """Initialize exception with message and status code."""
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class NotFoundException(AppException):
    """Resource not found exception."""

    def __init__(self, message: str = "Resource not found"):
        """Initialize with 404 status code."""
        super().__init__(message, status_code=404)


class UnauthorizedException(AppException):
    """Caller is not authenticated or lacks the required role."""

    def __init__(self, message: str = "unauthorized access"):
        """Initialize with 401 status code."""
        super().__init__(message, status_code=401)


class ForbiddenException(AppException):
    """Forbidden access exception."""

    def __init__(self, message: str = "Forbidden"):
        """Initialize with 403 status code."""
        super().__init__(message, status_code=403)


class BadRequestException(AppException):
    """Bad request exception."""

    def __init__(self, message: str = "Bad request"):
        """Initialize with 400 status code."""
        super().__init__(message, status_code=400)


class ConflictException(AppException):
    """Conflict exception."""

    def __init__(self, message: str = "Conflict"):
        """Initialize with 409 status code."""
        super().__init__(message, status_code=409)


class OutOfCapacityException(ConflictException):
    """No slot left on the listing."""

    def __init__(self, message: str = "No slots available for this test"):
        """Initialize with 409 status code."""
        super().__init__(message)


class InvalidAmountException(BadRequestException):
    """Payment amount missing or below the smallest chargeable unit."""

    def __init__(self, message: str = "Invalid payment amount"):
        """Initialize with 400 status code."""
        super().__init__(message)


class PaymentRequiredException(AppException):
    """Booking attempted without an authorized payment."""

    def __init__(self, message: str = "Payment has not been authorized"):
        """Initialize with 402 status code."""
        super().__init__(message, status_code=402)


class PaymentGatewayException(AppException):
    """Payment gateway rejected or failed the call."""

    def __init__(self, message: str = "Payment gateway error"):
        """Initialize with 502 status code."""
        super().__init__(message, status_code=502)


class StoreFailureException(AppException):
    """Persistence collaborator failed."""

    def __init__(self, message: str = "Storage temporarily unavailable"):
        """Initialize with 503 status code."""
        super().__init__(message, status_code=503)


class SigningError(AppException):
    """Session token could not be signed."""

    def __init__(self, message: str = "Session signing key unavailable"):
        """Initialize with 500 status code."""
        super().__init__(message, status_code=500)
