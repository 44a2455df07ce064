class HarClientException(Exception):
    """Base class for all harclient errors."""

    message = 'An unexpected error occurred'

    def __init__(self, message: str | None = None):
        self.message = message or self.message
        super().__init__(self.message)


class TransportError(HarClientException):
    """Raised when the HTTP exchange itself fails (connection, protocol, timeout)."""

    message = 'The HTTP exchange failed'


class EncodingError(HarClientException):
    """Raised internally when a declared charset cannot be resolved or applied."""

    message = 'The declared charset could not be used'


class InvalidRequest(HarClientException):
    """Raised when a request descriptor cannot be built."""

    message = 'The request is invalid'
