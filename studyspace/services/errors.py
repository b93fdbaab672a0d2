"""Errors raised by the service layer.

Each error carries the HTTP status it maps to and a stable, client-safe
message. Routes let them propagate; ``studyspace.main`` renders them.
"""


class ServiceError(Exception):
    status_code = 500
    message = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class NotAuthenticated(ServiceError):
    status_code = 401
    message = "user not authenticated"


class Unauthorized(ServiceError):
    status_code = 403
    message = "unauthorized: not an admin or moderator"


class UserNotFound(ServiceError):
    status_code = 404
    message = "user not found"


class GroupNotFound(ServiceError):
    status_code = 404
    message = "group not found"


class ApplicationNotFound(ServiceError):
    status_code = 404
    message = "no pending application found"


class InvalidStatus(ServiceError):
    status_code = 400
    message = "invalid status. Must be 'approved' or 'rejected'"


class AlreadyMember(ServiceError):
    status_code = 400
    message = "user is already a group member"


class DuplicateApplication(ServiceError):
    status_code = 400
    message = "application already submitted and pending"


class UserAlreadyExists(ServiceError):
    status_code = 400
    message = "user already exists"
