from enum import Enum
from typing import Union


class GcloudMcpError(Exception):
    """Base exception for all gcloud-mcp errors"""


class ConfigurationError(GcloudMcpError):
    """Raised when the server configuration is missing, unreadable or inconsistent"""


class GcloudNotFoundError(GcloudMcpError):
    """Raised when no gcloud executable can be located"""


class GcloudLintError(GcloudMcpError):
    """Raised when `gcloud meta lint-gcloud-commands` returns unusable output"""


class GcloudTimeoutError(GcloudMcpError):
    """Raised when a gcloud invocation exceeds its time limit"""


class ErrorKind(str, Enum):
    """Closed set of failure categories reported by gcloud invocations."""

    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"
    BAD_REQUEST = "bad_request"
    ALREADY_EXISTS = "already_exists"
    TIMEOUT = "timeout"
    UNKNOWN = "unknown"


# Checked in order; the first category with a matching marker wins.
_ERROR_MARKERS = (
    (ErrorKind.TIMEOUT, ("deadline_exceeded", "timed out", "timeout")),
    (ErrorKind.ALREADY_EXISTS, ("already_exists", "already exists", "alreadyexists")),
    (ErrorKind.NOT_FOUND, ("not_found", "not found", "notfound", "was not found", "404")),
    (
        ErrorKind.FORBIDDEN,
        ("permission_denied", "permission denied", "forbidden", "does not have permission", "403"),
    ),
    (ErrorKind.BAD_REQUEST, ("invalid_argument", "invalid argument", "bad request", "400")),
)


def classify_error(error: Union[BaseException, str, None]) -> ErrorKind:
    """Map an exception or a gcloud stderr message onto an ErrorKind."""
    if error is None:
        return ErrorKind.UNKNOWN
    if isinstance(error, (GcloudTimeoutError, TimeoutError)):
        return ErrorKind.TIMEOUT
    if isinstance(error, (GcloudNotFoundError, FileNotFoundError)):
        return ErrorKind.NOT_FOUND
    if isinstance(error, PermissionError):
        return ErrorKind.FORBIDDEN

    text = str(error).lower()
    if not text:
        return ErrorKind.UNKNOWN
    for kind, markers in _ERROR_MARKERS:
        if any(marker in text for marker in markers):
            return kind
    return ErrorKind.UNKNOWN
