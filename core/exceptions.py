"""S7 client exception classes.

All S7 exceptions inherit from S7Error. Catch S7Error to handle any
client or transport error. Use specific subclasses for finer-grained handling
or to access optional context attributes.

Exception hierarchy and optional context:
- S7Error: base (no context)
- S7InvalidDescriptorError: (no context), raised before any transport call
- S7UnsupportedTypeError: type_name
- S7AlreadyConnectedError: (no context)
- S7ConnectError: reason, host, port
- S7TransportError: code
- S7NotConnectedError: (no context)
- S7BatchError: codes, texts
"""

from typing import List, Optional, Sequence

__all__ = [
    "S7Error",
    "S7InvalidDescriptorError",
    "S7UnsupportedTypeError",
    "S7AlreadyConnectedError",
    "S7ConnectError",
    "S7TransportError",
    "S7NotConnectedError",
    "S7BatchError",
]


class S7Error(Exception):
    """Base exception for all S7-related errors."""

    pass


class S7InvalidDescriptorError(S7Error):
    """Raised when a variable description is malformed."""

    pass


class S7UnsupportedTypeError(S7InvalidDescriptorError):
    """Raised when a datatype is not in the codec registry."""

    def __init__(self, message: str, type_name: Optional[str] = None) -> None:
        super().__init__(message)
        self.type_name = type_name


class S7AlreadyConnectedError(S7Error):
    """Raised by connect() when the session is already established."""

    pass


class S7ConnectError(S7Error):
    """Raised when name resolution or the controller handshake fails."""

    def __init__(
        self,
        reason: str,
        host: Optional[str] = None,
        port: Optional[int] = None,
    ) -> None:
        super().__init__(reason)
        self.reason = reason
        self.host = host
        self.port = port


class S7TransportError(S7Error):
    """Raised when a single transport operation fails."""

    def __init__(self, message: str, code: Optional[int] = None) -> None:
        super().__init__(message)
        self.code = code


class S7NotConnectedError(S7TransportError):
    """Raised when an operation is attempted without an open session."""

    pass


class S7BatchError(S7TransportError):
    """Raised when one or more items of a batch report a non-zero result code."""

    def __init__(
        self,
        message: str,
        codes: Sequence[int],
        texts: Optional[Sequence[str]] = None,
    ) -> None:
        super().__init__(message)
        self.codes: List[int] = list(codes)
        self.texts: List[str] = list(texts) if texts is not None else []
