"""
Contract Binding - immutable handle on the deployed hammer contract.

A binding pairs the fixed address and ABI with an access handle: the
access provider (read-only) or a session signer (read-write).  Bindings are
never mutated; when the handle changes a new binding is built.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from ..chain.rpc import read_contract, wait_for_receipt
from ..chain.tx import build_contract_tx
from ..config import RECEIPT_POLL_INTERVAL
from ..wallet.injected import WalletSigner
from .errors import SubmitError, SubmitErrorKind
from .provider import AccessProvider

AccessHandle = Union[AccessProvider, WalletSigner]


@dataclass(frozen=True)
class SentTransaction:
    """A broadcast transaction awaiting inclusion."""

    tx_hash: str
    handle: AccessHandle
    poll_interval: float = RECEIPT_POLL_INTERVAL

    async def wait(self) -> dict:
        return await wait_for_receipt(
            self.handle, self.tx_hash, poll_interval=self.poll_interval
        )


@dataclass(frozen=True, eq=False)
class ContractBinding:
    address: str
    abi: list
    handle: AccessHandle
    poll_interval: float = RECEIPT_POLL_INTERVAL

    @property
    def writable(self) -> bool:
        return isinstance(self.handle, WalletSigner)

    async def call(self, function_name: str, *args: Any) -> Any:
        return await read_contract(
            self.handle, self.address, function_name, list(args), abi=self.abi
        )

    async def transact(
        self, function_name: str, *args: Any, value: int = 0
    ) -> SentTransaction:
        if not isinstance(self.handle, WalletSigner):
            raise SubmitError(
                SubmitErrorKind.LOCAL_PRECONDITION,
                "contract is bound read-only; connect a wallet first",
            )
        tx = build_contract_tx(
            self.address, function_name, list(args), abi=self.abi, value=value
        )
        tx_hash = await self.handle.send_transaction(tx)
        return SentTransaction(tx_hash, self.handle, self.poll_interval)


def bind(
    address: str,
    abi: list,
    handle: AccessHandle,
    poll_interval: float = RECEIPT_POLL_INTERVAL,
) -> ContractBinding:
    return ContractBinding(address, abi, handle, poll_interval)
