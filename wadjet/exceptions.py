"""Wadjet exception classes.

Every error raised while serving a request carries the HTTP status it maps
to. Raising one (directly or through ``bail``) from any depth of a command
handler aborts the request; the webhook route turns it into exactly one
``{"code": ..., "error": ...}`` response.
"""

from typing import NoReturn


class WadjetError(Exception):
    """Base exception for Wadjet errors."""
    pass


class HTTPError(WadjetError):
    """An error that terminates the current request with a status code."""

    code = 500

    def __init__(self, message: str, code: int = None):
        if code is not None:
            self.code = code
        self.message = message
        super().__init__(message)


class BadRequestError(HTTPError):
    """Raised when the request cannot be understood (400)."""
    code = 400


class UnauthorizedError(HTTPError):
    """Raised when the request fails authentication (401)."""
    code = 401


class InternalError(HTTPError):
    """Raised when the service fails to handle a valid request (500)."""
    code = 500


class MissingSignatureHeadersError(BadRequestError):
    """Raised when the timestamp or signature header is absent."""
    def __init__(self, header: str):
        self.header = header
        super().__init__(f"missing required header: {header}")


class MalformedSignatureError(BadRequestError):
    """Raised when a signature header cannot be decoded."""
    pass


class ExpiredTimestampError(UnauthorizedError):
    """Raised when the request timestamp falls outside the tolerance window."""
    def __init__(self, timestamp: int, skew: float):
        self.timestamp = timestamp
        self.skew = skew
        super().__init__(f"request timestamp {timestamp} is {skew:.0f}s out of tolerance")


class SignatureMismatchError(UnauthorizedError):
    """Raised when the request body does not match its signature."""
    def __init__(self, message: str = "signature does not match request"):
        super().__init__(message)


class InvalidSlashRequestError(BadRequestError):
    """Raised when the form body is not a slash command."""
    def __init__(self, reason: str):
        self.reason = reason
        super().__init__("invalid slash request")


class ArgumentParseError(BadRequestError):
    """Raised when command text cannot be split into arguments."""
    def __init__(self, cause: str):
        self.cause = cause
        super().__init__(f"unable to parse command arguments: {cause}")


class UnrecognizedCommandError(BadRequestError):
    """Raised when no handler is registered under a command name."""
    def __init__(self, name: str):
        self.name = name
        super().__init__(f'unrecognized command "{name}"')


class CommandError(InternalError):
    """Raised when a command handler fails."""
    def __init__(self, command: str, cause: BaseException):
        self.command = command
        self.cause = cause
        super().__init__(f'error running command "{command}": {cause}')


class HelpRequested(WadjetError):
    """Raised by a command's flag parser when help was asked for.

    This is not a failure: the dispatcher treats it as success with no
    structured reply.
    """
    pass


class CommandUsageError(WadjetError):
    """Raised by a command's flag parser on invalid flags or arguments."""
    def __init__(self, message: str, status: int = 2):
        self.status = status
        super().__init__(message)


def bail(code: int, fmt: str, *args) -> NoReturn:
    """Abort the current request with ``code`` and a formatted message."""
    raise HTTPError(fmt % args if args else fmt, code=code)
