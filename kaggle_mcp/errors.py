"""Error types raised when talking to the Kaggle API."""

from __future__ import annotations

import json

import requests


class KaggleError(Exception):
    """An error response returned by the Kaggle API."""

    def __init__(self, code: str, message: str) -> None:
        super().__init__(code, message)
        self.code = code
        self.message = message

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, KaggleError):
            return NotImplemented
        return (self.code, self.message) == (other.code, other.message)

    def __hash__(self) -> int:
        return hash((self.code, self.message))


class KaggleMcpError(Exception):
    """Base class for every error raised by this package.

    Raised directly for errors that fit none of the specific subclasses.
    """

    prefix = ""

    def __init__(self, detail: object = "") -> None:
        super().__init__(detail)
        self.detail = detail

    def __str__(self) -> str:
        return f"{self.prefix}{self.detail}"


class AuthenticationError(KaggleMcpError):
    """The supplied credentials were rejected."""

    prefix = "Authentication failed: "


class ApiError(KaggleMcpError):
    """The Kaggle API answered with an error response."""

    prefix = "API error: "

    def __init__(self, error: KaggleError) -> None:
        super().__init__(error)
        self.error = error


class HttpError(KaggleMcpError):
    """The HTTP request itself failed."""

    prefix = "HTTP error: "


class JsonError(KaggleMcpError):
    """JSON could not be encoded, decoded or mapped onto a model."""

    prefix = "JSON error: "


class IoError(KaggleMcpError):
    """A file system operation failed."""

    prefix = "IO error: "


class InvalidParameterError(KaggleMcpError):
    """A method was given a parameter it cannot use."""

    prefix = "Invalid parameter: "


class NotAuthenticatedError(KaggleMcpError):
    """No credentials are available."""

    def __init__(self) -> None:
        super().__init__("Not authenticated")


def wrap_exception(exc: BaseException) -> KaggleMcpError:
    """Convert an arbitrary exception into the matching package error.

    Package errors are returned unchanged; the original exception is kept
    as the cause of the new one.
    """
    if isinstance(exc, KaggleMcpError):
        return exc
    wrapped: KaggleMcpError
    if isinstance(exc, KaggleError):
        wrapped = ApiError(exc)
    elif isinstance(exc, requests.RequestException):
        wrapped = HttpError(exc)
    elif isinstance(exc, json.JSONDecodeError):
        wrapped = JsonError(exc)
    elif isinstance(exc, OSError):
        wrapped = IoError(exc)
    else:
        wrapped = KaggleMcpError(str(exc))
    wrapped.__cause__ = exc
    return wrapped