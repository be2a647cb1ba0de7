"""Tests for access provider initialization and the session manager."""

from __future__ import annotations

import asyncio

import pytest

from hammerdapp.chain.abi import HAMMER_ABI, encode_call
from hammerdapp.chain.rpc import RpcError
from hammerdapp.config import HAMMER_CONTRACT_ADDRESS
from hammerdapp.core.errors import ConnectError, ConnectErrorKind, ProviderInitError, ProviderInitErrorKind
from hammerdapp.core.provider import MODE_PROFILES, AccessMode, TxKind, initialize
from hammerdapp.core.session import (
    EMPTY_SESSION,
    Session,
    SessionManager,
    SessionState,
    classify_connect_error,
)
from hammerdapp.wallet.injected import REQUEST_PENDING, USER_REJECTED, WalletError


def _assert_invariant(session: Session) -> None:
    assert (session.signer is not None) == (session.account_address is not None)


class TestInitialize:
    def test_wallet_mode_without_wallet(self) -> None:
        with pytest.raises(ProviderInitError) as excinfo:
            initialize(AccessMode.WALLET_INJECTED, wallet=None)
        assert excinfo.value.kind is ProviderInitErrorKind.NOT_AVAILABLE

    def test_wallet_mode_does_no_io(self, make_wallet, chain) -> None:
        provider = initialize(AccessMode.WALLET_INJECTED, wallet=make_wallet())
        assert provider.wallet is not None
        assert chain.calls == []

    def test_remote_mode_does_no_io(self, chain) -> None:
        initialize(AccessMode.REMOTE_READ_ONLY, rpc=chain.rpc())
        assert chain.calls == []

    @pytest.mark.parametrize("mode", list(AccessMode))
    def test_initializing_twice_gives_readable_providers(self, mode, make_wallet, chain) -> None:
        def build():
            if mode is AccessMode.WALLET_INJECTED:
                return initialize(mode, wallet=make_wallet())
            return initialize(mode, rpc=chain.rpc())

        first, second = build(), build()
        assert first is not second
        for provider in (first, second):
            assert asyncio.run(provider.request("eth_chainId")) == hex(11155111)

    def test_raw_call(self, chain) -> None:
        provider = initialize(AccessMode.REMOTE_READ_ONLY, rpc=chain.rpc())
        data = encode_call(HAMMER_ABI, "getAvailableHammers", [])
        result = asyncio.run(provider.call({"to": HAMMER_CONTRACT_ADDRESS, "data": data}))
        assert int(result, 16) == 5

    def test_remote_failure_surfaces_on_first_read(self, chain) -> None:
        provider = initialize(AccessMode.REMOTE_READ_ONLY, rpc=chain.rpc())
        with pytest.raises(RpcError):
            asyncio.run(provider.request("eth_noSuchMethod"))


class TestModeProfiles:
    def test_wallet_mode_offers_everything(self) -> None:
        profile = MODE_PROFILES[AccessMode.WALLET_INJECTED]
        assert profile.can_connect
        assert profile.operations == {TxKind.ASSEMBLE_INVENTORY, TxKind.PURCHASE_ITEM}

    def test_remote_mode_is_read_only(self) -> None:
        profile = MODE_PROFILES[AccessMode.REMOTE_READ_ONLY]
        assert not profile.can_connect
        assert profile.operations == frozenset()
        assert profile.auto_refresh


class TestSessionInvariant:
    def test_empty_session(self) -> None:
        _assert_invariant(EMPTY_SESSION)
        assert not EMPTY_SESSION.connected

    def test_address_without_signer_rejected(self) -> None:
        with pytest.raises(ValueError):
            Session(account_address="0x" + "11" * 20)


class TestConnect:
    def test_successful_handshake(self, make_wallet) -> None:
        wallet = make_wallet()
        manager = SessionManager(initialize(AccessMode.WALLET_INJECTED, wallet=wallet))
        _assert_invariant(manager.session)

        session = asyncio.run(manager.connect())

        assert manager.state is SessionState.CONNECTED
        assert session is manager.session
        assert session.account_address == wallet.address
        assert session.signer.address == wallet.address
        _assert_invariant(session)

    def test_connect_when_connected_returns_existing(self, make_wallet) -> None:
        manager = SessionManager(initialize(AccessMode.WALLET_INJECTED, wallet=make_wallet()))

        async def run():
            first = await manager.connect()
            second = await manager.connect()
            return first, second

        first, second = asyncio.run(run())
        assert first is second

    def test_concurrent_connect_prompts_once(self, make_wallet) -> None:
        prompts: list[str] = []

        async def run():
            release = asyncio.Event()

            async def slow_approve(kind: str, detail: dict) -> bool:
                prompts.append(kind)
                await release.wait()
                return True

            manager = SessionManager(
                initialize(AccessMode.WALLET_INJECTED, wallet=make_wallet(slow_approve))
            )
            first = asyncio.create_task(manager.connect())
            await asyncio.sleep(0)
            assert manager.state is SessionState.CONNECTING
            _assert_invariant(manager.session)
            second = await manager.connect()
            release.set()
            return await first, second

        first, second = asyncio.run(run())
        assert prompts == ["connect"]
        assert first is not None
        assert second is None

    def test_user_rejection(self, make_wallet) -> None:
        async def decline(kind: str, detail: dict) -> bool:
            return False

        manager = SessionManager(initialize(AccessMode.WALLET_INJECTED, wallet=make_wallet(decline)))
        with pytest.raises(ConnectError) as excinfo:
            asyncio.run(manager.connect())

        assert excinfo.value.kind is ConnectErrorKind.USER_REJECTED
        assert manager.state is SessionState.DISCONNECTED
        assert manager.session is EMPTY_SESSION

    def test_retry_after_rejection(self, make_wallet) -> None:
        answers = [False, True]

        async def approve(kind: str, detail: dict) -> bool:
            return answers.pop(0)

        manager = SessionManager(initialize(AccessMode.WALLET_INJECTED, wallet=make_wallet(approve)))

        async def run():
            with pytest.raises(ConnectError):
                await manager.connect()
            return await manager.connect()

        session = asyncio.run(run())
        assert session.connected
        assert manager.state is SessionState.CONNECTED

    def test_remote_mode_cannot_connect(self, chain) -> None:
        manager = SessionManager(initialize(AccessMode.REMOTE_READ_ONLY, rpc=chain.rpc()))
        with pytest.raises(ConnectError):
            asyncio.run(manager.connect())
        assert chain.calls == []
        assert manager.state is SessionState.DISCONNECTED


class TestClassifyConnectError:
    def test_user_rejected(self) -> None:
        error = classify_connect_error(WalletError(USER_REJECTED, "User rejected the request."))
        assert error.kind is ConnectErrorKind.USER_REJECTED

    def test_ethers_style_rejection(self) -> None:
        exc = RuntimeError("user rejected action")
        exc.code = "ACTION_REJECTED"
        assert classify_connect_error(exc).kind is ConnectErrorKind.USER_REJECTED

    def test_request_pending(self) -> None:
        error = classify_connect_error(WalletError(REQUEST_PENDING, "already pending"))
        assert error.kind is ConnectErrorKind.REQUEST_PENDING

    def test_unknown_keeps_message(self) -> None:
        error = classify_connect_error(RpcError(-32603, "Internal JSON-RPC error."))
        assert error.kind is ConnectErrorKind.UNKNOWN
        assert error.detail == "Internal JSON-RPC error."
        assert "Internal JSON-RPC error." in str(error)

    def test_connect_error_passes_through(self) -> None:
        original = ConnectError(ConnectErrorKind.REQUEST_PENDING)
        assert classify_connect_error(original) is original
