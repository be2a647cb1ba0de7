"""
ABI - Hammer contract interface and call encoding.

The contract surface is fixed, so the ABI ships with the package instead of
being loaded from a build artifact.
"""

from __future__ import annotations

from typing import Any

from eth_abi import decode, encode
from eth_hash.auto import keccak


HAMMER_ABI: list[dict[str, Any]] = [
    {
        "type": "function",
        "name": "assembleHammer",
        "inputs": [
            {"name": "name", "type": "string"},
            {"name": "salePrice", "type": "uint256"},
        ],
        "outputs": [],
        "stateMutability": "nonpayable",
    },
    {
        "type": "function",
        "name": "purchaseHammer",
        "inputs": [],
        "outputs": [],
        "stateMutability": "payable",
    },
    {
        "type": "function",
        "name": "getAvailableHammers",
        "inputs": [],
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
    },
    {
        "type": "function",
        "name": "hammerSalePrice",
        "inputs": [],
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
    },
]


def keccak256(data: bytes) -> bytes:
    # NOTE: Keccak-256 != SHA3-256 (NIST). Never use hashlib.sha3_256 here.
    return keccak(data)


def find_function(abi: list, function_name: str) -> dict[str, Any]:
    for entry in abi:
        if entry.get("type") == "function" and entry.get("name") == function_name:
            return entry
    raise ValueError(f"Function {function_name} not found in ABI")


def function_selector(func: dict[str, Any]) -> bytes:
    """First 4 bytes of keccak256 over the canonical signature."""
    input_types = [inp["type"] for inp in func.get("inputs", [])]
    sig = f"{func['name']}({','.join(input_types)})"
    return keccak256(sig.encode("utf-8"))[:4]


def is_payable(abi: list, function_name: str) -> bool:
    return find_function(abi, function_name).get("stateMutability") == "payable"


def encode_call(abi: list, function_name: str, args: list) -> str:
    """
    ABI-encode a function call.

    Args:
        abi: Contract ABI
        function_name: Function name to call
        args: Function arguments

    Returns:
        0x-prefixed hex encoded calldata
    """
    func = find_function(abi, function_name)
    input_types = [inp["type"] for inp in func.get("inputs", [])]
    if len(args) != len(input_types):
        raise ValueError(
            f"{function_name} expects {len(input_types)} argument(s), got {len(args)}"
        )

    selector = function_selector(func)
    encoded_args = encode(input_types, list(args)) if args else b""

    return "0x" + selector.hex() + encoded_args.hex()


def decode_result(abi: list, function_name: str, data: str) -> Any:
    """
    ABI-decode a function call result.

    Args:
        abi: Contract ABI
        function_name: Function name
        data: 0x-prefixed hex encoded return data

    Returns:
        Decoded result (single value or tuple); None for functions
        without outputs
    """
    func = find_function(abi, function_name)

    output_types = [out["type"] for out in func.get("outputs", [])]
    if not output_types:
        return None

    raw = bytes.fromhex(data[2:]) if data.startswith("0x") else bytes.fromhex(data)
    decoded = decode(output_types, raw)

    if len(decoded) == 1:
        return decoded[0]
    return decoded
