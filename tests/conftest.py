"""
Shared fixtures: an in-memory hammer chain behind httpx.MockTransport.

The fake node answers the JSON-RPC methods the client uses.  Tests steer
it through plain attributes (stock, price, broadcast errors, receipt
status, dropped transactions) and inspect ``calls`` afterwards.
"""

from __future__ import annotations

import json
import os
from typing import Any, Callable, Optional
from unittest.mock import patch

import httpx
import pytest
from eth_abi import encode
from eth_hash.auto import keccak

from hammerdapp.chain.abi import HAMMER_ABI, find_function, function_selector
from hammerdapp.chain.rpc import RpcClient
from hammerdapp.units import parse_ether
from hammerdapp.wallet.injected import Approver, LocalKeyWallet, approve_all
from hammerdapp.wallet.keys import generate_eoa

FAKE_URL = "http://fake-node.test"
CHAIN_ID = 11155111


def _selector(name: str) -> str:
    return "0x" + function_selector(find_function(HAMMER_ABI, name)).hex()


def _uint(value: int) -> str:
    return "0x" + encode(["uint256"], [value]).hex()


class FakeRpcError(Exception):
    def __init__(self, payload: dict) -> None:
        super().__init__(payload.get("message"))
        self.payload = payload


class FakeChain:
    """Minimal hammer contract + node."""

    def __init__(self, available: int = 5, price: Optional[int] = parse_ether("0.3")) -> None:
        self.available = available
        self.price = price  # None: hammerSalePrice reverts
        self.available_error: Optional[dict] = None
        self.broadcast_error: Optional[dict] = None
        self.receipt_status = 1
        self.drop = False
        self.pending_polls = 0
        self.on_mined: Optional[Callable[[], None]] = None
        self.on_receipt_poll: Optional[Callable[[], None]] = None
        self.calls: list[str] = []
        self.raw_transactions: list[str] = []
        self.nonce = 0
        self._pending: dict[str, int] = {}
        self._mined: set[str] = set()

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self._handle)

    def rpc(self) -> RpcClient:
        return RpcClient(FAKE_URL, transport=self.transport)

    def writes(self) -> list[str]:
        return [c for c in self.calls if c == "eth_sendRawTransaction"]

    def _handle(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        self.calls.append(body["method"])
        envelope: dict[str, Any] = {"jsonrpc": "2.0", "id": body["id"]}
        try:
            envelope["result"] = self._dispatch(body["method"], body["params"])
        except FakeRpcError as exc:
            envelope["error"] = exc.payload
        return httpx.Response(200, json=envelope)

    def _dispatch(self, method: str, params: list) -> Any:
        if method == "eth_chainId":
            return hex(CHAIN_ID)
        if method == "eth_gasPrice":
            return hex(10**9)
        if method == "eth_getTransactionCount":
            return hex(self.nonce)
        if method == "eth_call":
            return self._call(params[0]["data"])
        if method == "eth_sendRawTransaction":
            return self._broadcast(params[0])
        if method == "eth_getTransactionReceipt":
            return self._receipt(params[0])
        if method == "eth_getTransactionByHash":
            tx_hash = params[0]
            if self.drop or tx_hash not in self._pending:
                return None
            return {"hash": tx_hash}
        raise FakeRpcError({"code": -32601, "message": f"method {method} not found"})

    def _call(self, data: str) -> str:
        if data.startswith(_selector("getAvailableHammers")):
            if self.available_error is not None:
                raise FakeRpcError(self.available_error)
            return _uint(self.available)
        if data.startswith(_selector("hammerSalePrice")):
            if self.price is None:
                raise FakeRpcError({"code": 3, "message": "execution reverted"})
            return _uint(self.price)
        raise FakeRpcError({"code": -32000, "message": "unknown function selector"})

    def _broadcast(self, raw_tx: str) -> str:
        if self.broadcast_error is not None:
            raise FakeRpcError(self.broadcast_error)
        tx_hash = "0x" + keccak(bytes.fromhex(raw_tx[2:])).hex()
        self.raw_transactions.append(raw_tx)
        self.nonce += 1
        self._pending[tx_hash] = self.pending_polls
        return tx_hash

    def _receipt(self, tx_hash: str) -> Optional[dict]:
        if self.on_receipt_poll is not None:
            self.on_receipt_poll()
        if self.drop or tx_hash not in self._pending:
            return None
        if self._pending[tx_hash] > 0:
            self._pending[tx_hash] -= 1
            return None
        if self.receipt_status == 1 and tx_hash not in self._mined:
            self._mined.add(tx_hash)
            if self.on_mined is not None:
                self.on_mined()
        return {"transactionHash": tx_hash, "status": hex(self.receipt_status)}


@pytest.fixture()
def chain() -> FakeChain:
    return FakeChain()


@pytest.fixture()
def private_key() -> str:
    return generate_eoa()[0]


@pytest.fixture()
def make_wallet(chain: FakeChain, private_key: str) -> Callable[..., LocalKeyWallet]:
    def _make(approve: Approver = approve_all) -> LocalKeyWallet:
        return LocalKeyWallet(private_key, chain.rpc(), approve)

    return _make


@pytest.fixture()
def no_key_env(tmp_path):
    """Point the key file at an empty temp dir and hide PRIVATE_KEY."""
    env = {k: v for k, v in os.environ.items() if k != "PRIVATE_KEY"}
    with patch("hammerdapp.config.HAMMERDAPP_ENV", tmp_path / ".env"):
        with patch.dict(os.environ, env, clear=True):
            yield tmp_path / ".env"
