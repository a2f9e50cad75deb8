"""
Domain exceptions raised by the service layer.

Routers translate these into HTTP responses. Messages attached here may be
logged but are never forwarded verbatim to clients for credential, token or
storage failures.
"""


class ServiceError(Exception):
    """Base exception for service-layer failures."""

    pass


class InvalidInputError(ServiceError):
    """Raised when request data is missing or malformed."""

    pass


class DuplicateIdentityError(ServiceError):
    """Raised when registering an email that already exists."""

    pass


class InvalidCredentialError(ServiceError):
    """Raised when a password does not match the stored hash."""

    pass


class InvalidTokenError(ServiceError):
    """Raised for any session token verification failure."""

    pass


class NotFoundError(ServiceError):
    """Raised when a resource is absent or not owned by the caller."""

    pass


class FileTooLargeError(ServiceError):
    """Raised when an upload exceeds the configured size limit."""

    def __init__(self, max_size: int):
        self.max_size = max_size
        super().__init__(f"File exceeds maximum allowed size ({max_size} bytes)")


class StorageWriteFailedError(ServiceError):
    """Raised when an upload could not be persisted."""

    pass


class StorageReadFailedError(ServiceError):
    """Raised when the bytes of an existing record cannot be read."""

    pass
