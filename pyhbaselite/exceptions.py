from http import client as http_client


SERVICE_OVERLOADED = 509


class HBaseLiteError(Exception):
    """Base class for all exceptions raised by pyhbaselite"""

    pass


class PreconditionError(HBaseLiteError):
    """Raised when arguments or configuration do not meet preconditions"""

    pass


class InvalidRangeError(PreconditionError, ValueError):
    """Raised when a key range cannot be split"""

    pass


class TransportError(HBaseLiteError, OSError):
    """Raised when a request could not be delivered to a gateway host.

    Args:
        message (str): The exception message.
        host (str): The host the failing attempt was sent to, if any.
    """

    def __init__(self, message, host=None):
        super(TransportError, self).__init__(message)
        self.message = message
        self.host = host


class AuthenticationError(TransportError):
    """Raised when Kerberos credentials could not be acquired"""

    pass


class HBaseLiteAPIError(HBaseLiteError):
    """Base class for exceptions raised for gateway responses.

    Args:
        message (str): The exception message.
        status_code (int): Overrides the class level status code.
        path (str): The request path or URI that produced the response.
    """

    status_code = None
    """Status code the gateway answered with, ``None`` when unknown."""

    def __init__(self, message, status_code=None, path=None):
        super(HBaseLiteAPIError, self).__init__(message)
        self.message = message
        self.path = path
        if status_code is not None:
            self.status_code = status_code

    def __str__(self):
        return f"[{self.status_code}]: {self.message}"


class UnexpectedStatusError(HBaseLiteAPIError):
    """Raised for a response code the operation does not handle."""


class ClientError(UnexpectedStatusError):
    """Gateway rejected the request (4xx)."""


class BadRequest(ClientError):
    """Malformed row, column or scanner spec."""

    status_code = http_client.BAD_REQUEST


class Unauthorized(ClientError):
    """Gateway refused the credentials."""

    status_code = http_client.UNAUTHORIZED


class Forbidden(ClientError):
    """Caller lacks permission on the table."""

    status_code = http_client.FORBIDDEN


class EndpointNotFoundError(ClientError):
    """A resource the operation requires does not exist."""

    status_code = http_client.NOT_FOUND


class Conflict(ClientError):
    """Table or scanner state conflict."""

    status_code = http_client.CONFLICT


class ServerError(UnexpectedStatusError):
    """Gateway or region server failed (5xx)."""


class InternalServerError(ServerError):
    """Unhandled error inside the gateway."""

    status_code = http_client.INTERNAL_SERVER_ERROR


class GatewayTimeout(ServerError):
    """Gateway gave up waiting on a region server."""

    status_code = http_client.GATEWAY_TIMEOUT


class ServiceOverloaded(ServerError):
    """Gateway is overloaded (509)."""

    status_code = SERVICE_OVERLOADED


class RetriesExhaustedError(HBaseLiteAPIError):
    """Raised when the gateway kept answering 509 for every attempt."""

    status_code = SERVICE_OVERLOADED

    def __init__(self, message, attempts, path=None):
        super(RetriesExhaustedError, self).__init__(message, path=path)
        self.attempts = attempts


_STATUS_ERRORS = {
    cls.status_code: cls
    for cls in (
        BadRequest,
        Unauthorized,
        Forbidden,
        EndpointNotFoundError,
        Conflict,
        InternalServerError,
        GatewayTimeout,
        ServiceOverloaded,
    )
}


def error_for_status(status_code: int, message: str, path: str = None):
    """Build the most specific exception for an unexpected status code."""
    cls = _STATUS_ERRORS.get(status_code)
    if cls is not None:
        return cls(message, path=path)
    if 400 <= status_code < 500:
        return ClientError(message, status_code=status_code, path=path)
    if 500 <= status_code < 600:
        return ServerError(message, status_code=status_code, path=path)
    return UnexpectedStatusError(message, status_code=status_code, path=path)
