"""
Transaction Orchestrator - drives one state-changing call to a terminal stage.

    IDLE --submit--> SUBMITTING --broadcast accepted--> PENDING --mined--> CONFIRMED
                     SUBMITTING --broadcast rejected--> FAILED
                                                       PENDING --reverted/dropped--> FAILED

Only one record is current.  Every transition installs a new
TransactionRecord; nothing is mutated in place.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Awaitable, Callable, Optional

from ..chain.rpc import TransactionDroppedError, TransactionRevertedError
from ..wallet.injected import WalletError
from .context import ChainContext
from .errors import SubmitError, SubmitErrorKind
from .provider import TxKind

logger = logging.getLogger(__name__)


class TxStage(str, Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    PENDING = "pending"
    CONFIRMED = "confirmed"
    FAILED = "failed"


TERMINAL_STAGES = frozenset({TxStage.CONFIRMED, TxStage.FAILED})


@dataclass(frozen=True)
class Operation:
    function: str
    label: str
    submitting: str
    pending: str
    success: str


OPERATIONS: dict[TxKind, Operation] = {
    TxKind.ASSEMBLE_INVENTORY: Operation(
        function="assembleHammer",
        label="assemble hammer",
        submitting="Sending transaction to assemble hammer...",
        pending="Waiting for hammer assembly to confirm...",
        success="Hammer assembled successfully!",
    ),
    TxKind.PURCHASE_ITEM: Operation(
        function="purchaseHammer",
        label="purchase hammer",
        submitting="Sending purchase transaction...",
        pending="Waiting for hammer purchase to confirm...",
        success="Hammer purchased successfully!",
    ),
}


@dataclass(frozen=True)
class TransactionRecord:
    kind: Optional[TxKind] = None
    stage: TxStage = TxStage.IDLE
    status_message: str = ""
    error_class: Optional[SubmitErrorKind] = None
    tx_hash: Optional[str] = None

    @property
    def terminal(self) -> bool:
        return self.stage in TERMINAL_STAGES

    @property
    def busy(self) -> bool:
        return self.stage in (TxStage.SUBMITTING, TxStage.PENDING)


IDLE_RECORD = TransactionRecord()


def classify_submit_error(exc: BaseException, stage: TxStage) -> SubmitErrorKind:
    """Map a failure raised at ``stage`` onto a SubmitError category."""
    if isinstance(exc, SubmitError):
        return exc.kind
    if isinstance(exc, (TransactionRevertedError, TransactionDroppedError)):
        return SubmitErrorKind.ON_CHAIN_REVERT
    if isinstance(exc, WalletError) or stage is TxStage.SUBMITTING:
        return SubmitErrorKind.BROADCAST_REJECTED
    return SubmitErrorKind.UNKNOWN


def _cause(exc: BaseException) -> str:
    return getattr(exc, "message", None) or str(exc) or type(exc).__name__


TerminalCallback = Callable[[TransactionRecord], Awaitable[None]]


class TransactionOrchestrator:
    """Submits hammer contract writes and tracks the current record."""

    def __init__(
        self,
        get_context: Callable[[], ChainContext],
        on_terminal: Optional[TerminalCallback] = None,
    ) -> None:
        self._get_context = get_context
        self._on_terminal = on_terminal
        self._epoch = 0
        self.record = IDLE_RECORD

    def reset(self) -> None:
        """Drop the current record; outcomes of in-flight calls are ignored."""
        self._epoch += 1
        self.record = IDLE_RECORD

    async def submit(
        self, kind: TxKind, *args: Any, value: Optional[int] = None
    ) -> TransactionRecord:
        """
        Submit a hammer contract write and wait for it to settle.

        Args:
            kind: Which operation to run
            *args: Contract call arguments
            value: Wei attached to the call (the sale price for purchases)

        Returns:
            The terminal TransactionRecord

        Raises:
            SubmitError: LOCAL_PRECONDITION if a previous submission is
                still in flight (the current record is left untouched)
        """
        if self.record.busy:
            raise SubmitError(
                SubmitErrorKind.LOCAL_PRECONDITION,
                "A transaction is already in progress. Wait for it to finish.",
            )

        op = OPERATIONS[kind]
        context = self._get_context()
        problem = self._check_preconditions(kind, context, value)
        if problem is not None:
            self.record = TransactionRecord(
                kind=kind,
                stage=TxStage.FAILED,
                status_message=f"Failed to {op.label}: {problem}",
                error_class=SubmitErrorKind.LOCAL_PRECONDITION,
            )
            logger.info("%s refused locally: %s", op.function, problem)
            return self.record

        binding = context.binding
        epoch = self._epoch
        self.record = TransactionRecord(
            kind=kind, stage=TxStage.SUBMITTING, status_message=op.submitting
        )
        logger.info("%s: submitting", op.function)

        try:
            sent = await binding.transact(op.function, *args, value=value or 0)
        except Exception as exc:
            return await self._fail(epoch, kind, exc, TxStage.SUBMITTING)

        if epoch != self._epoch:
            return self._discarded(kind, sent.tx_hash)

        self.record = replace(
            self.record,
            stage=TxStage.PENDING,
            status_message=op.pending,
            tx_hash=sent.tx_hash,
        )
        logger.info("%s: pending %s", op.function, sent.tx_hash)

        try:
            await sent.wait()
        except Exception as exc:
            return await self._fail(epoch, kind, exc, TxStage.PENDING, sent.tx_hash)

        if epoch != self._epoch:
            return self._discarded(kind, sent.tx_hash)

        self.record = replace(
            self.record, stage=TxStage.CONFIRMED, status_message=op.success
        )
        logger.info("%s: confirmed %s", op.function, sent.tx_hash)
        await self._notify()
        return self.record

    def _check_preconditions(
        self, kind: TxKind, context: ChainContext, value: Optional[int]
    ) -> Optional[str]:
        if kind not in context.profile.operations:
            return f"not available in {context.mode.value} mode"
        if context.binding is None:
            return "contract is not bound yet"
        if not context.binding.writable:
            return "connect a wallet first"
        if kind is TxKind.PURCHASE_ITEM and value is None:
            return "sale price is unknown"
        return None

    async def _fail(
        self,
        epoch: int,
        kind: TxKind,
        exc: BaseException,
        stage: TxStage,
        tx_hash: Optional[str] = None,
    ) -> TransactionRecord:
        op = OPERATIONS[kind]
        error_class = classify_submit_error(exc, stage)
        record = TransactionRecord(
            kind=kind,
            stage=TxStage.FAILED,
            status_message=f"Failed to {op.label}: {_cause(exc)}",
            error_class=error_class,
            tx_hash=tx_hash,
        )
        if epoch != self._epoch:
            logger.info("Discarding stale failure of %s: %s", op.function, exc)
            return record

        self.record = record
        logger.warning("%s failed while %s (%s): %s", op.function, stage.value, error_class.value, exc)
        await self._notify()
        return record

    def _discarded(self, kind: TxKind, tx_hash: str) -> TransactionRecord:
        logger.info("Discarding stale outcome of %s (%s)", OPERATIONS[kind].function, tx_hash)
        return TransactionRecord(kind=kind, stage=TxStage.IDLE, tx_hash=tx_hash)

    async def _notify(self) -> None:
        if self._on_terminal is not None:
            await self._on_terminal(self.record)
