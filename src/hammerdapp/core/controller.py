"""
DappController - wires the provider, session, binding, orchestrator and
poller together behind the actions a user can take.

Every action catches its own errors and turns them into ``error`` text;
nothing raised by the chain, the wallet or the contract escapes.

Two events drive re-reads of the inventory:
- BINDING_CHANGED:      the contract binding was rebuilt
- TRANSACTION_TERMINAL: the current record reached CONFIRMED or FAILED
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Awaitable, Callable, Optional

from ..chain.abi import HAMMER_ABI
from ..chain.rpc import RpcClient
from ..config import HAMMER_CONTRACT_ADDRESS, RECEIPT_POLL_INTERVAL, REMOTE_RPC_URL
from ..units import parse_ether
from ..wallet.injected import LocalKeyWallet
from .binding import AccessHandle, bind
from .context import ChainContext
from .errors import (
    ConnectError,
    ConnectErrorKind,
    HammerDappError,
    ProviderInitError,
    ProviderInitErrorKind,
    ReadError,
    SubmitError,
    SubmitErrorKind,
)
from .orchestrator import TransactionOrchestrator, TransactionRecord, TxStage
from .poller import EMPTY_SNAPSHOT, InventorySnapshot, refresh as read_inventory
from .provider import AccessMode, TxKind, initialize
from .session import Session, SessionManager, SessionState

logger = logging.getLogger(__name__)

DEFAULT_HAMMER_NAME = "Basic Hammer"
DEFAULT_HAMMER_PRICE = parse_ether("0.3")


class Event(str, Enum):
    BINDING_CHANGED = "binding_changed"
    TRANSACTION_TERMINAL = "transaction_terminal"


Listener = Callable[[ChainContext], Awaitable[None]]


class DappController:
    def __init__(
        self,
        mode: AccessMode = AccessMode.WALLET_INJECTED,
        *,
        wallet_factory: Callable[[], Optional[LocalKeyWallet]] = lambda: None,
        rpc_factory: Optional[Callable[[], RpcClient]] = None,
        rpc_url: str = REMOTE_RPC_URL,
        poll_interval: float = RECEIPT_POLL_INTERVAL,
    ) -> None:
        self._wallet_factory = wallet_factory
        self._rpc_factory = rpc_factory or (lambda: RpcClient(rpc_url))
        self._poll_interval = poll_interval
        self._listeners: dict[Event, list[Listener]] = {event: [] for event in Event}

        self.context = ChainContext(version=0, mode=mode)
        self._sessions: Optional[SessionManager] = None
        self.orchestrator = TransactionOrchestrator(
            lambda: self.context, on_terminal=self._transaction_settled
        )
        self.snapshot = EMPTY_SNAPSHOT
        self.failure: Optional[HammerDappError] = None

        self.subscribe(Event.BINDING_CHANGED, self._auto_refresh)
        self.subscribe(Event.TRANSACTION_TERMINAL, self._auto_refresh)

    # ============ Events ============

    def subscribe(self, event: Event, listener: Listener) -> None:
        self._listeners[event].append(listener)

    async def _emit(self, event: Event) -> None:
        for listener in list(self._listeners[event]):
            await listener(self.context)

    async def _auto_refresh(self, context: ChainContext) -> None:
        if context.profile.auto_refresh:
            await self.refresh()

    async def _transaction_settled(self, record: TransactionRecord) -> None:
        await self._emit(Event.TRANSACTION_TERMINAL)

    # ============ Read-only view ============

    @property
    def mode(self) -> AccessMode:
        return self.context.mode

    @property
    def session(self) -> Session:
        return self.context.session

    @property
    def session_state(self) -> SessionState:
        if self._sessions is None:
            return SessionState.DISCONNECTED
        return self._sessions.state

    @property
    def account(self) -> Optional[str]:
        return self.context.session.account_address

    @property
    def record(self) -> TransactionRecord:
        return self.orchestrator.record

    @property
    def error(self) -> str:
        return str(self.failure) if self.failure is not None else ""

    @property
    def status(self) -> str:
        if self.record.stage is TxStage.FAILED:
            return ""
        return self.record.status_message

    def can_submit(self, kind: TxKind) -> bool:
        binding = self.context.binding
        return (
            kind in self.context.profile.operations
            and binding is not None
            and binding.writable
            and not self.record.busy
            and (kind is not TxKind.PURCHASE_ITEM or self.snapshot.available_count > 0)
        )

    # ============ Actions ============

    async def start(self) -> None:
        await self.switch_mode(self.context.mode)

    async def switch_mode(self, mode: AccessMode) -> None:
        """Tear down and rebuild everything downstream of the provider."""
        old_provider = self.context.provider
        self.orchestrator.reset()
        self.snapshot = EMPTY_SNAPSHOT
        self.failure = None
        self._sessions = None

        try:
            if mode is AccessMode.WALLET_INJECTED:
                provider = initialize(mode, wallet=self._discover_wallet())
            else:
                provider = initialize(mode, rpc=self._rpc_factory())
        except ProviderInitError as exc:
            self.context = ChainContext(version=self.context.version + 1, mode=mode)
            self.failure = exc
            logger.warning("Provider init failed for %s: %s", mode.value, exc)
            await self._close(old_provider)
            return

        self.context = ChainContext(
            version=self.context.version + 1,
            mode=mode,
            provider=provider,
            binding=self._bind(provider),
        )
        self._sessions = SessionManager(provider)
        await self._close(old_provider)
        logger.info("Access mode %s (context v%d)", mode.value, self.context.version)
        await self._emit(Event.BINDING_CHANGED)

    async def connect(self) -> Optional[Session]:
        manager = self._sessions
        if manager is None and isinstance(self.failure, ProviderInitError):
            return None
        if manager is None or not self.context.profile.can_connect:
            self.failure = ConnectError(
                ConnectErrorKind.UNKNOWN,
                f"connecting a wallet is not available in {self.mode.value} mode",
            )
            return None

        self.failure = None
        try:
            session = await manager.connect()
        except ConnectError as exc:
            if manager is self._sessions:
                self.failure = exc
            return None

        if session is None or manager is not self._sessions:
            return None
        if session is self.context.session:
            return session

        self.context = self.context.evolve(
            session=session, binding=self._bind(session.signer)
        )
        await self._emit(Event.BINDING_CHANGED)
        return session

    async def assemble(
        self, name: str = DEFAULT_HAMMER_NAME, price_wei: int = DEFAULT_HAMMER_PRICE
    ) -> TransactionRecord:
        return await self._submit(TxKind.ASSEMBLE_INVENTORY, name, price_wei)

    async def purchase(self) -> TransactionRecord:
        if self.snapshot.available_count == 0:
            self.failure = SubmitError(
                SubmitErrorKind.LOCAL_PRECONDITION,
                "Failed to purchase hammer: no hammers available",
            )
            return self.record
        return await self._submit(
            TxKind.PURCHASE_ITEM, value=self.snapshot.unit_price
        )

    async def refresh(self) -> InventorySnapshot:
        binding = self.context.binding
        if binding is None:
            return self.snapshot
        try:
            snapshot = await read_inventory(binding)
        except ReadError as exc:
            if binding is self.context.binding:
                self.failure = exc
            return self.snapshot
        if binding is self.context.binding:
            self.snapshot = snapshot
        return snapshot

    async def aclose(self) -> None:
        if self.context.provider is not None:
            await self.context.provider.aclose()

    # ============ Helpers ============

    async def _submit(self, kind: TxKind, *args, value: Optional[int] = None) -> TransactionRecord:
        self.failure = None
        try:
            record = await self.orchestrator.submit(kind, *args, value=value)
        except SubmitError as exc:
            self.failure = exc
            return self.record
        if record.stage is TxStage.FAILED and record is self.record:
            self.failure = SubmitError(record.error_class, record.status_message)
        return record

    def _discover_wallet(self) -> Optional[LocalKeyWallet]:
        try:
            return self._wallet_factory()
        except ValueError as exc:
            raise ProviderInitError(str(exc), ProviderInitErrorKind.NOT_AVAILABLE) from exc

    def _bind(self, handle: AccessHandle):
        return bind(HAMMER_CONTRACT_ADDRESS, HAMMER_ABI, handle, self._poll_interval)

    async def _close(self, provider) -> None:
        if provider is not None and provider is not self.context.provider:
            await provider.aclose()
