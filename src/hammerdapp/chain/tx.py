"""
Transaction Builder - Build, fill, and sign Ethereum transactions.

Uses eth-account for signing and the httpx-based JSON-RPC client for the
node-side fields (nonce, gas price, chain id).  Gas is whatever the signing
environment proposes; nothing here estimates fees.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from eth_account.signers.local import LocalAccount

from ..config import DEFAULT_GAS_LIMIT
from .abi import encode_call, keccak256
from .rpc import Endpoint, get_chain_id, get_gas_price, get_nonce

logger = logging.getLogger(__name__)


def to_checksum_address(address: str) -> str:
    """Convert an address to EIP-55 checksummed format.

    eth-account requires checksummed addresses in transaction fields.
    """
    addr = address.lower().replace("0x", "")
    if len(addr) != 40:
        raise ValueError(f"Invalid address: {address}")
    addr_hash = keccak256(addr.encode("utf-8")).hex()
    result = "0x"
    for i, c in enumerate(addr):
        if c in "abcdef":
            result += c.upper() if int(addr_hash[i], 16) >= 8 else c
        else:
            result += c
    return result


def build_contract_tx(
    contract_address: str,
    function_name: str,
    args: list,
    abi: list,
    value: int = 0,
    sender: Optional[str] = None,
) -> dict[str, Any]:
    """
    Build a contract call request in eth_sendTransaction shape.

    Args:
        contract_address: 0x-prefixed contract address
        function_name: Function to call
        args: Function arguments
        abi: Contract ABI
        value: ETH value in wei (default: 0)
        sender: Optional "from" address

    Returns:
        Transaction request dict with hex quantities, ready for a wallet
    """
    tx: dict[str, Any] = {
        "to": to_checksum_address(contract_address),
        "data": encode_call(abi, function_name, args),
        "value": hex(value),
    }
    if sender is not None:
        tx["from"] = to_checksum_address(sender)
    return tx


def _quantity(value: Any) -> int:
    if isinstance(value, str):
        return int(value, 16)
    return int(value)


async def fill_transaction(
    endpoint: Endpoint,
    request: dict[str, Any],
    sender: str,
) -> dict[str, Any]:
    """
    Complete a transaction request with node-provided fields.

    Fields already present in the request win over node suggestions.

    Returns:
        Signable legacy transaction dict (integer quantities)
    """
    tx: dict[str, Any] = {
        "to": to_checksum_address(request["to"]),
        "data": request.get("data", "0x"),
        "value": _quantity(request.get("value", 0)),
    }
    tx["nonce"] = (
        _quantity(request["nonce"]) if "nonce" in request
        else await get_nonce(endpoint, sender)
    )
    tx["gasPrice"] = (
        _quantity(request["gasPrice"]) if "gasPrice" in request
        else await get_gas_price(endpoint)
    )
    tx["gas"] = _quantity(request.get("gas", DEFAULT_GAS_LIMIT))
    tx["chainId"] = (
        _quantity(request["chainId"]) if "chainId" in request
        else await get_chain_id(endpoint)
    )
    return tx


def sign_transaction(account: LocalAccount, tx: dict[str, Any]) -> str:
    """Sign a filled transaction; returns 0x-prefixed raw bytes."""
    signed = account.sign_transaction(tx)
    return "0x" + bytes(signed.raw_transaction).hex()
