# localmart/core/errors.py
"""
Error types raised by the service layer.

Each error carries the stable ``code`` and HTTP ``status_code`` the API layer
renders as ``{"error": {"code": ..., "message": ...}}``.
"""


class ServiceError(Exception):
    code = "INTERNAL_SERVER_ERROR"
    status_code = 500
    default_message = "An unexpected error occurred."

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self):
        return {"error": {"code": self.code, "message": self.message}}


class UnauthorizedError(ServiceError):
    code = "UNAUTHORIZED"
    status_code = 401
    default_message = "Authentication required."


class PermissionDeniedError(ServiceError):
    code = "PERMISSION_DENIED"
    status_code = 403
    default_message = "You are not allowed to access this resource."


class NotFoundError(ServiceError):
    code = "RESOURCE_NOT_FOUND"
    status_code = 404
    default_message = "Resource not found."


class InvalidInputError(ServiceError):
    code = "INVALID_INPUT"
    status_code = 400
    default_message = "Invalid input."


class ConflictError(ServiceError):
    code = "CONFLICT"
    status_code = 409
    default_message = "Resource already exists."


class TransientError(ServiceError):
    code = "SERVICE_UNAVAILABLE"
    status_code = 503
    default_message = "The service is temporarily unavailable, please retry."
