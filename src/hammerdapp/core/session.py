"""
Session Manager - promotes a wallet provider into a signing session.

States:
    DISCONNECTED -> CONNECTING -> CONNECTED
    CONNECTING -> DISCONNECTED   (rejection or failure)

The wallet prompt inside ``connect`` can block for as long as the user
takes; a second ``connect`` while it is open does nothing, so the user is
never shown two prompts.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..wallet.injected import REQUEST_PENDING, USER_REJECTED, WalletSigner
from .errors import ConnectError, ConnectErrorKind
from .provider import AccessMode, AccessProvider

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


@dataclass(frozen=True)
class Session:
    account_address: Optional[str] = None
    signer: Optional[WalletSigner] = None

    def __post_init__(self) -> None:
        if (self.account_address is None) != (self.signer is None):
            raise ValueError("account_address and signer must be set together")

    @property
    def connected(self) -> bool:
        return self.signer is not None


EMPTY_SESSION = Session()


def classify_connect_error(exc: BaseException) -> ConnectError:
    """Map a raw wallet failure onto the ConnectError categories.

    Works on anything carrying an EIP-1193 ``code`` (int) or an ethers-style
    string code; the message is kept as detail for unknown failures.
    """
    if isinstance(exc, ConnectError):
        return exc
    code = getattr(exc, "code", None)
    if code == USER_REJECTED or code == "ACTION_REJECTED":
        return ConnectError(ConnectErrorKind.USER_REJECTED)
    if code == REQUEST_PENDING:
        return ConnectError(ConnectErrorKind.REQUEST_PENDING)
    detail = getattr(exc, "message", None) or str(exc) or type(exc).__name__
    return ConnectError(ConnectErrorKind.UNKNOWN, detail)


class SessionManager:
    """Owns the current account identity and signing capability."""

    def __init__(self, provider: AccessProvider) -> None:
        self.provider = provider
        self.state = SessionState.DISCONNECTED
        self.session = EMPTY_SESSION

    async def connect(self) -> Optional[Session]:
        """
        Ask the wallet for account access and derive a signer.

        Returns:
            The connected Session; None if a connect is already in progress

        Raises:
            ConnectError: classified wallet failure (state back to DISCONNECTED)
        """
        if self.provider.mode is not AccessMode.WALLET_INJECTED:
            raise ConnectError(
                ConnectErrorKind.UNKNOWN,
                "the remote read-only provider cannot sign transactions",
            )
        if self.state is SessionState.CONNECTING:
            logger.debug("connect() ignored: wallet prompt already open")
            return None
        if self.state is SessionState.CONNECTED:
            return self.session

        self.state = SessionState.CONNECTING
        try:
            accounts = await self.provider.request("eth_requestAccounts", [])
            if not accounts:
                raise ConnectError(ConnectErrorKind.UNKNOWN, "wallet returned no accounts")
            address = accounts[0]
            signer = self.provider.get_signer(address)
        except Exception as exc:
            self.state = SessionState.DISCONNECTED
            self.session = EMPTY_SESSION
            error = classify_connect_error(exc)
            logger.warning("Wallet connect failed (%s): %s", error.kind.value, error)
            if error is exc:
                raise
            raise error from exc

        self.session = Session(account_address=signer.address, signer=signer)
        self.state = SessionState.CONNECTED
        logger.info("Connected account %s", signer.address)
        return self.session
