# luxejewel/domain/errors.py


class ValidationError(ValueError):
    """Bad input (HTTP 400)."""


class NotFoundError(LookupError):
    """Requested row does not exist (HTTP 404)."""


class ConflictError(Exception):
    """Uniqueness violation (HTTP 409)."""


class AuthError(Exception):
    """Missing or invalid credentials (HTTP 401)."""


class ProviderError(Exception):
    """
    Failure of an external AI provider call.
    `status` carries the HTTP status code when there was a response.
    """

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.status = status
