"""
Injected wallet endpoint.

Plays the role a browser extension wallet plays for a web page: an object
answering EIP-1193 ``request(method, params)`` calls, asking the user before
revealing accounts or signing anything.

The shipped implementation keeps a local secp256k1 key (see ``keys``),
signs with eth-account and broadcasts through the JSON-RPC client.  Reads
are forwarded to the node unchanged.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional

from ..chain.rpc import RpcClient, send_raw_transaction
from ..chain.tx import fill_transaction, sign_transaction
from .keys import get_account, load_private_key

logger = logging.getLogger(__name__)

# EIP-1193 provider error codes
USER_REJECTED = 4001
UNAUTHORIZED = 4100
REQUEST_PENDING = -32002

# approve(kind, detail) -> bool; kind is "connect" or "transaction"
Approver = Callable[[str, dict], Awaitable[bool]]


async def approve_all(kind: str, detail: dict) -> bool:
    return True


class WalletError(RuntimeError):
    """Error raised by the wallet endpoint, shaped like an EIP-1193 error."""

    def __init__(self, code: int, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message


class LocalKeyWallet:
    """EIP-1193 style wallet backed by a local private key."""

    def __init__(
        self,
        private_key: str,
        rpc: RpcClient,
        approve: Approver = approve_all,
    ) -> None:
        self._account = get_account(private_key)
        self.rpc = rpc
        self._approve = approve
        self._authorized = False
        self._prompt_open = False

    @property
    def address(self) -> str:
        return self._account.address

    async def request(self, method: str, params: Optional[list] = None) -> Any:
        params = params or []
        if method == "eth_requestAccounts":
            return await self._request_accounts()
        if method == "eth_accounts":
            return [self.address] if self._authorized else []
        if method == "eth_sendTransaction":
            return await self._send_transaction(params[0])
        return await self.rpc.request(method, params)

    def get_signer(self, address: str) -> "WalletSigner":
        """Derive a signer scoped to an account the user has authorized."""
        if not self._authorized or address.lower() != self.address.lower():
            raise WalletError(
                UNAUTHORIZED,
                f"The requested account {address} has not been authorized by the user.",
            )
        return WalletSigner(wallet=self, address=self.address)

    async def _request_accounts(self) -> list[str]:
        if self._authorized:
            return [self.address]
        if self._prompt_open:
            raise WalletError(
                REQUEST_PENDING,
                "Request of type 'wallet_requestPermissions' already pending. Please wait.",
            )

        self._prompt_open = True
        try:
            approved = await self._approve("connect", {"account": self.address})
        finally:
            self._prompt_open = False

        if not approved:
            raise WalletError(USER_REJECTED, "User rejected the request.")

        self._authorized = True
        logger.info("Wallet account %s authorized", self.address)
        return [self.address]

    async def _send_transaction(self, request: dict) -> str:
        sender = request.get("from", self.address)
        if not self._authorized or sender.lower() != self.address.lower():
            raise WalletError(
                UNAUTHORIZED,
                "The requested account and/or method has not been authorized by the user.",
            )

        tx = await fill_transaction(self.rpc, request, self.address)
        if not await self._approve("transaction", dict(tx)):
            raise WalletError(USER_REJECTED, "User denied transaction signature.")

        raw_tx = sign_transaction(self._account, tx)
        tx_hash = await send_raw_transaction(self.rpc, raw_tx)
        logger.info("Broadcast transaction %s (nonce %d)", tx_hash, tx["nonce"])
        return tx_hash


@dataclass(frozen=True, eq=False)
class WalletSigner:
    """Signing capability bound to one authorized wallet account.

    Compares by identity: a fresh signer after a reconnect is a new handle.
    """

    wallet: LocalKeyWallet
    address: str

    async def request(self, method: str, params: Optional[list] = None) -> Any:
        return await self.wallet.request(method, params)

    async def send_transaction(self, tx: dict) -> str:
        return await self.wallet.request(
            "eth_sendTransaction", [{**tx, "from": self.address}]
        )


def discover_wallet(
    rpc: RpcClient,
    approve: Approver = approve_all,
    env_path: Optional[Path] = None,
) -> Optional[LocalKeyWallet]:
    """Return the wallet present in this environment, or None.

    A wallet is present when a private key is configured.

    Raises:
        ValueError: If the configured key is malformed
    """
    try:
        private_key = load_private_key(env_path)
    except ValueError:
        logger.debug("No wallet key configured")
        return None
    return LocalKeyWallet(private_key, rpc, approve)
