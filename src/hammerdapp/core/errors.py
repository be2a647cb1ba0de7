"""
Error taxonomy for the connection and transaction state machine.

HammerDappError (base)
├── ProviderInitError  NOT_AVAILABLE
├── ConnectError       USER_REJECTED | REQUEST_PENDING | UNKNOWN
├── SubmitError        LOCAL_PRECONDITION | BROADCAST_REJECTED | ON_CHAIN_REVERT | UNKNOWN
└── ReadError          UNAVAILABLE

``exit_code`` is the process status the CLI uses for each family.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class ProviderInitErrorKind(str, Enum):
    NOT_AVAILABLE = "not_available"


class ConnectErrorKind(str, Enum):
    USER_REJECTED = "user_rejected"
    REQUEST_PENDING = "request_pending"
    UNKNOWN = "unknown"


class SubmitErrorKind(str, Enum):
    LOCAL_PRECONDITION = "local_precondition"
    BROADCAST_REJECTED = "broadcast_rejected"
    ON_CHAIN_REVERT = "on_chain_revert"
    UNKNOWN = "unknown"


class ReadErrorKind(str, Enum):
    UNAVAILABLE = "unavailable"


class HammerDappError(RuntimeError):
    exit_code: int = 1


class ProviderInitError(HammerDappError):
    exit_code = 2

    def __init__(
        self,
        message: str,
        kind: ProviderInitErrorKind = ProviderInitErrorKind.NOT_AVAILABLE,
    ) -> None:
        super().__init__(message)
        self.kind = kind


class ConnectError(HammerDappError):
    exit_code = 3

    def __init__(self, kind: ConnectErrorKind, detail: Optional[str] = None) -> None:
        super().__init__(_connect_message(kind, detail))
        self.kind = kind
        self.detail = detail


class SubmitError(HammerDappError):
    exit_code = 4

    def __init__(self, kind: SubmitErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind


class ReadError(HammerDappError):
    exit_code = 5

    def __init__(
        self,
        message: str,
        kind: ReadErrorKind = ReadErrorKind.UNAVAILABLE,
    ) -> None:
        super().__init__(message)
        self.kind = kind


def _connect_message(kind: ConnectErrorKind, detail: Optional[str]) -> str:
    if kind is ConnectErrorKind.USER_REJECTED:
        return "Connection request rejected in the wallet."
    if kind is ConnectErrorKind.REQUEST_PENDING:
        return "A connection request is already open in the wallet. Please finish it there."
    return f"Failed to connect wallet: {detail or 'unknown error'}"
