"""
Access Provider - the single source of chain reads (and, for the wallet
mode, of signing).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from ..chain.rpc import Endpoint, RpcClient
from ..config import REMOTE_RPC_URL
from ..wallet.injected import LocalKeyWallet, WalletSigner
from .errors import ProviderInitError, ProviderInitErrorKind

logger = logging.getLogger(__name__)


class AccessMode(str, Enum):
    WALLET_INJECTED = "wallet"
    REMOTE_READ_ONLY = "remote"


class TxKind(str, Enum):
    ASSEMBLE_INVENTORY = "assemble"
    PURCHASE_ITEM = "purchase"


@dataclass(frozen=True)
class ModeProfile:
    """What the client offers while running in a given access mode."""

    can_connect: bool
    operations: frozenset
    auto_refresh: bool = True


MODE_PROFILES: dict[AccessMode, ModeProfile] = {
    AccessMode.WALLET_INJECTED: ModeProfile(
        can_connect=True,
        operations=frozenset({TxKind.ASSEMBLE_INVENTORY, TxKind.PURCHASE_ITEM}),
    ),
    AccessMode.REMOTE_READ_ONLY: ModeProfile(
        can_connect=False,
        operations=frozenset(),
    ),
}


@dataclass(frozen=True, eq=False)
class AccessProvider:
    mode: AccessMode
    endpoint: Endpoint
    wallet: Optional[LocalKeyWallet] = None

    @property
    def profile(self) -> ModeProfile:
        return MODE_PROFILES[self.mode]

    async def request(self, method: str, params: Optional[list] = None) -> Any:
        return await self.endpoint.request(method, params)

    async def call(self, tx: dict, block: str = "latest") -> str:
        """eth_call; returns the raw 0x-hex result."""
        return await self.endpoint.request("eth_call", [tx, block])

    def get_signer(self, address: str) -> WalletSigner:
        if self.wallet is None:
            raise ProviderInitError(
                "Read-only provider has no signing capability.",
                ProviderInitErrorKind.NOT_AVAILABLE,
            )
        return self.wallet.get_signer(address)

    async def aclose(self) -> None:
        rpc = self.wallet.rpc if self.wallet is not None else self.endpoint
        if isinstance(rpc, RpcClient):
            await rpc.aclose()


def initialize(
    mode: AccessMode,
    *,
    wallet: Optional[LocalKeyWallet] = None,
    rpc: Optional[RpcClient] = None,
    rpc_url: str = REMOTE_RPC_URL,
) -> AccessProvider:
    """
    Build an access provider for ``mode``.

    No network traffic happens here.  For the wallet mode no account is
    revealed until the session manager asks for one.

    Args:
        mode: Access mode to initialize
        wallet: Wallet endpoint found in the host environment, if any
        rpc: Pre-built RPC client for the remote mode
        rpc_url: Remote endpoint URL (default: the fixed public node)

    Raises:
        ProviderInitError: NOT_AVAILABLE if the wallet mode has no wallet
    """
    if mode is AccessMode.WALLET_INJECTED:
        if wallet is None:
            raise ProviderInitError(
                "No wallet found. Run 'hammerdapp keygen' or set PRIVATE_KEY.",
                ProviderInitErrorKind.NOT_AVAILABLE,
            )
        logger.info("Access provider: injected wallet")
        return AccessProvider(mode=mode, endpoint=wallet, wallet=wallet)

    logger.info("Access provider: remote read-only endpoint %s", rpc.url if rpc else rpc_url)
    return AccessProvider(mode=mode, endpoint=rpc or RpcClient(rpc_url))
