class SignOffCheckerError(Exception):
    pass


class AuthenticationError(SignOffCheckerError):
    """The webhook signature is missing, malformed or does not match."""


class DecodeError(SignOffCheckerError):
    """The webhook payload could not be decoded into a known event."""


class RemoteError(SignOffCheckerError):
    """A GitHub API call failed with a non-2xx status or a transport error."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class RemoteNotFound(RemoteError):
    def __init__(self, message: str):
        super().__init__(message, status_code=404)


class SweepError(SignOffCheckerError):
    def __init__(self, message: str, duration: float):
        super().__init__(message)
        self.duration = duration
