"""Exceptions raised across the shopcast ports.

The classification and resolution core has no error path of its own;
these exceptions belong to the adapters that talk to the outside world.
"""


class ShopcastError(Exception):
    """Base class for shopcast errors."""


class DispatchError(ShopcastError):
    """Raised when the chat transport rejects a notification.

    Attributes:
        status_code: HTTP status returned by the transport, if any.
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
