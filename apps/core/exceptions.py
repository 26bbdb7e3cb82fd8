"""
Custom exceptions for the Storefront API
"""


class StorefrontException(Exception):
    """Base exception for all storefront errors"""
    status_code = 500

    def __init__(self, message: str, code: str = "STOREFRONT_ERROR", status_code: int = None):
        self.message = message
        self.code = code
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class ValidationException(StorefrontException):
    """Exception raised for request or business-rule validation errors"""
    status_code = 400

    def __init__(self, message: str = "Validation failed", errors: list = None):
        self.errors = errors or []
        super().__init__(message=message, code="VALIDATION_ERROR")

    @classmethod
    def for_field(cls, field: str, message: str, summary: str = "Validation failed"):
        return cls(summary, errors=[{"field": field, "message": message}])


class UnauthorizedException(StorefrontException):
    status_code = 401

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message=message, code="UNAUTHORIZED")


class ForbiddenException(StorefrontException):
    status_code = 403

    def __init__(self, message: str = "Forbidden"):
        super().__init__(message=message, code="FORBIDDEN")


class NotFoundException(StorefrontException):
    status_code = 404

    def __init__(self, message: str = "Resource not found"):
        super().__init__(message=message, code="NOT_FOUND")


class ConflictException(StorefrontException):
    status_code = 409

    def __init__(self, message: str = "Resource already exists"):
        super().__init__(message=message, code="CONFLICT")


class PaymentGatewayException(ValidationException):
    """Raised when Stripe rejects a request"""
    def __init__(self, message: str, field: str, reason: str):
        super().__init__(message, errors=[{"field": field, "message": reason}])
        self.code = "PAYMENT_ERROR"
