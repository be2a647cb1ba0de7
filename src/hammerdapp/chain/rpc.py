"""
JSON-RPC Client for the hammer contract's chain.

Lightweight alternative to web3.py: uses httpx for HTTP + eth-abi for encoding.
Supports read-only contract calls, raw transaction broadcast, and receipt
polling.  All calls are async so that reads, wallet prompts and confirmation
waits interleave on one event loop.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional, Protocol

import httpx

from ..config import REMOTE_RPC_URL
from .abi import decode_result, encode_call

logger = logging.getLogger(__name__)


class RpcError(RuntimeError):
    """JSON-RPC error object returned by a node or a wallet.

    Attributes:
        code: JSON-RPC error code (e.g. -32000, 3 for reverts)
        message: Error message as reported by the remote side
        data: Optional extra payload (revert data, etc.)
    """

    def __init__(self, code: int, message: str, data: Any = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.data = data

    @classmethod
    def from_payload(cls, payload: Any) -> "RpcError":
        if isinstance(payload, dict):
            return cls(
                int(payload.get("code", -32603)),
                str(payload.get("message", "unknown RPC error")),
                payload.get("data"),
            )
        return cls(-32603, str(payload))


class TransactionRevertedError(RuntimeError):
    """Raised when a mined transaction has status 0."""

    def __init__(self, tx_hash: str, receipt: dict) -> None:
        super().__init__(f"transaction {tx_hash} reverted on-chain")
        self.tx_hash = tx_hash
        self.receipt = receipt


class TransactionDroppedError(RuntimeError):
    """Raised when the node no longer knows a broadcast transaction."""

    def __init__(self, tx_hash: str) -> None:
        super().__init__(f"transaction {tx_hash} was dropped from the mempool")
        self.tx_hash = tx_hash


class Endpoint(Protocol):
    """Anything that answers EIP-1193 style ``request`` calls."""

    async def request(self, method: str, params: Optional[list] = None) -> Any:
        ...


class RpcClient:
    """Async JSON-RPC 2.0 client over HTTP.

    The ``httpx.AsyncClient`` is created on first use, so constructing an
    ``RpcClient`` never touches the network.
    """

    def __init__(
        self,
        url: str = REMOTE_RPC_URL,
        timeout: float = 30,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        self._next_id = 1

    def _http(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            )
        return self._client

    async def request(self, method: str, params: Optional[list] = None) -> Any:
        """
        Make a JSON-RPC call.

        Args:
            method: RPC method name (e.g., "eth_call")
            params: RPC parameters

        Returns:
            Result field from the RPC response

        Raises:
            RpcError: If the node answers with an error object
            httpx.HTTPError: If the endpoint is unreachable or not 2xx
        """
        payload = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params or [],
            "id": self._next_id,
        }
        self._next_id += 1

        logger.debug("rpc %s -> %s", method, self.url)
        response = await self._http().post(self.url, json=payload)
        response.raise_for_status()
        data = response.json()

        if "error" in data:
            raise RpcError.from_payload(data["error"])

        return data.get("result")

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None


async def read_contract(
    endpoint: Endpoint,
    contract_address: str,
    function_name: str,
    args: Optional[list] = None,
    abi: Optional[list] = None,
) -> Any:
    """
    Read from a smart contract (eth_call).

    Args:
        endpoint: Node or wallet endpoint used for the call
        contract_address: 0x-prefixed contract address
        function_name: Function to call
        args: Function arguments (default: [])
        abi: Contract ABI

    Returns:
        Decoded return value(s), or None for an empty result
    """
    if abi is None:
        raise ValueError("abi must be provided")

    calldata = encode_call(abi, function_name, args or [])

    result = await endpoint.request(
        "eth_call",
        [{"to": contract_address, "data": calldata}, "latest"],
    )

    if result is None or result == "0x":
        return None

    return decode_result(abi, function_name, result)


async def get_chain_id(endpoint: Endpoint) -> int:
    return int(await endpoint.request("eth_chainId", []), 16)


async def get_nonce(endpoint: Endpoint, address: str) -> int:
    """Get the pending transaction count for an address."""
    result = await endpoint.request("eth_getTransactionCount", [address, "pending"])
    return int(result, 16)


async def get_gas_price(endpoint: Endpoint) -> int:
    result = await endpoint.request("eth_gasPrice", [])
    return int(result, 16)


async def send_raw_transaction(endpoint: Endpoint, raw_tx: str) -> str:
    """
    Send a signed raw transaction.

    Args:
        raw_tx: 0x-prefixed hex encoded signed transaction

    Returns:
        Transaction hash (0x-prefixed hex)
    """
    return await endpoint.request("eth_sendRawTransaction", [raw_tx])


async def wait_for_receipt(
    endpoint: Endpoint,
    tx_hash: str,
    poll_interval: float = 2.0,
    drop_after: int = 3,
) -> dict:
    """
    Wait for a transaction receipt.

    There is no client-side timeout: the wait ends when the transaction is
    mined, or when the node reports it unknown on ``drop_after`` consecutive
    polls.

    Args:
        endpoint: Node or wallet endpoint
        tx_hash: Transaction hash
        poll_interval: Polling interval in seconds
        drop_after: Consecutive "unknown transaction" polls before giving up

    Returns:
        Transaction receipt dict (status 1)

    Raises:
        TransactionRevertedError: If the receipt has status 0
        TransactionDroppedError: If the transaction disappeared
    """
    missing = 0
    while True:
        receipt = await endpoint.request("eth_getTransactionReceipt", [tx_hash])
        if receipt is not None:
            if int(receipt.get("status", "0x0"), 16) != 1:
                raise TransactionRevertedError(tx_hash, receipt)
            return receipt

        known = await endpoint.request("eth_getTransactionByHash", [tx_hash])
        if known is None:
            missing += 1
            if missing >= drop_after:
                raise TransactionDroppedError(tx_hash)
        else:
            missing = 0

        await asyncio.sleep(poll_interval)
