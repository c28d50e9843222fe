"""Service errors and the JSON envelope they are rendered into.

Services raise these; ``careconnect.main`` turns them into responses of the form
``{"success": false, "error": {"kind": ..., "code": ..., "message": ...}}``.
"""


class ServiceError(Exception):
    kind = "SERVICE_ERROR"
    status_code = 400

    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code
        self.message = message

    def to_dict(self) -> dict:
        return {"kind": self.kind, "code": self.code, "message": self.message}


class NotFound(ServiceError):
    kind = "NOT_FOUND"
    status_code = 404


class Conflict(ServiceError):
    kind = "CONFLICT"
    status_code = 409


class InvalidOwnership(ServiceError):
    kind = "INVALID_OWNERSHIP"
    status_code = 403


class AlreadyInTerminalState(ServiceError):
    kind = "ALREADY_IN_TERMINAL_STATE"
    status_code = 409


class ValidationFailed(ServiceError):
    kind = "VALIDATION_ERROR"
    status_code = 400


class InvalidCredentials(ServiceError):
    kind = "INVALID_CREDENTIALS"
    status_code = 401


class IdentifierExhausted(ServiceError):
    kind = "IDENTIFIER_EXHAUSTED"
    status_code = 503


def error_response(kind: str, code: str, message: str) -> dict:
    return {"success": False, "error": {"kind": kind, "code": code, "message": message}}
