class CustomBaseError(Exception):
    """Base class for all custom exceptions - controls logging behavior in @Logger.io"""

    def __init__(self, message: str, status_code: int) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class DomainError(CustomBaseError):
    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message, status_code)


class NotFoundError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 404)


class ConflictError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 409)


class GatewayError(CustomBaseError):
    """Remote booking service unreachable, failed, or answered with an unusable body."""

    def __init__(self, message: str, *, remote_status: int | None = None) -> None:
        super().__init__(message, 502)
        self.remote_status = remote_status

    @property
    def is_rejection(self) -> bool:
        """The service answered and refused the request (4xx) - retrying will not help."""
        return self.remote_status is not None and 400 <= self.remote_status < 500


class PersistenceError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 500)
