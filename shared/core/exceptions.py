from fastapi import HTTPException, status


class AppException(HTTPException):
    """Base for every failure that ends up in the response envelope."""

    http_status = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: str | None = None, headers: dict | None = None):
        self.message = message or self.default_message
        super().__init__(status_code=self.http_status,
                         detail=self.message, headers=headers)


class InvalidRequest(AppException):
    http_status = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class Unauthorized(AppException):
    http_status = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"

    def __init__(self, message: str | None = None, headers: dict | None = None):
        super().__init__(message, headers or {"WWW-Authenticate": "Bearer"})


class CredentialInvalid(Unauthorized):
    default_message = "Invalid token"


class CredentialExpired(Unauthorized):
    default_message = "Token has expired"


class InvalidCredential(CredentialInvalid):
    default_message = "Invalid token claims"


class Forbidden(AppException):
    http_status = status.HTTP_403_FORBIDDEN
    default_message = "Access denied"


class NotFound(AppException):
    http_status = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class Conflict(AppException):
    http_status = status.HTTP_409_CONFLICT
    default_message = "Conflict"


class PersistenceError(AppException):
    default_message = "Database operation failed"


class StorageIOError(AppException):
    default_message = "File storage operation failed"


class ConfigurationError(AppException):
    default_message = "Server is not configured correctly"


class OperationTimeout(AppException):
    http_status = status.HTTP_504_GATEWAY_TIMEOUT
    default_message = "Operation timed out"
