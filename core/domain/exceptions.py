"""
Domain exceptions.

Domain exceptions represent business rule violations
and domain-specific error conditions.
"""


class DomainException(Exception):
    """Base exception for all domain exceptions."""

    def __init__(self, message: str, code: str = None):
        """
        Initialize domain exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code
        """
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class InvalidInputError(DomainException):
    """Raised when required input is missing or malformed."""

    def __init__(self, message: str = "Invalid input"):
        super().__init__(message, code="INVALID_INPUT")


class LicenseException(DomainException):
    """Base exception for license-related errors."""

    pass


class LicenseNotFoundError(LicenseException):
    """Raised when a license key is not known to the store."""

    def __init__(self, message: str = "Invalid license key"):
        super().__init__(message, code="LICENSE_NOT_FOUND")


class LicenseNotActivatedError(LicenseException):
    """Raised when verifying a license that was never activated."""

    def __init__(self, message: str = "License key is not activated"):
        super().__init__(message, code="LICENSE_NOT_ACTIVATED")


class LicenseRevokedError(LicenseException):
    """Raised when a license has been revoked by an operator."""

    def __init__(self, message: str = "License has been revoked"):
        super().__init__(message, code="LICENSE_REVOKED")


class LicenseExpiredError(LicenseException):
    """Raised when a license has expired."""

    def __init__(self, message: str = "License has expired"):
        super().__init__(message, code="LICENSE_EXPIRED")


class LicenseConflictError(LicenseException):
    """Base exception for device binding conflicts."""

    pass


class DeviceConflictError(LicenseConflictError):
    """Raised when activating a license already bound to another device."""

    def __init__(self, message: str = "License is already activated on another device"):
        super().__init__(message, code="DEVICE_CONFLICT")


class DeviceMismatchError(LicenseConflictError):
    """Raised when verifying a license from a device it is not bound to."""

    def __init__(self, message: str = "License is not activated for this device"):
        super().__init__(message, code="DEVICE_MISMATCH")


class InternalError(DomainException):
    """Base exception for failures the caller cannot fix."""

    pass


class KeyGenerationError(InternalError):
    """Raised when the secure random source cannot produce a key."""

    def __init__(self, message: str = "Secure random source unavailable"):
        super().__init__(message, code="KEY_GENERATION_FAILED")


class LicenseKeyCollisionError(InternalError):
    """Raised when every generated key collided with an existing one."""

    def __init__(self, message: str = "Could not generate a unique license key"):
        super().__init__(message, code="LICENSE_KEY_COLLISION")


class StoreUnavailableError(InternalError):
    """Raised when the license store cannot be reached or times out."""

    def __init__(self, message: str = "License store is unavailable"):
        super().__init__(message, code="STORE_UNAVAILABLE")
