__all__ = [
    # Access
    "AccessMode",
    "AccessProvider",
    "ModeProfile",
    "MODE_PROFILES",
    "TxKind",
    "initialize",
    # Session
    "Session",
    "SessionManager",
    "SessionState",
    "classify_connect_error",
    # Contract
    "ContractBinding",
    "SentTransaction",
    "bind",
    "HAMMER_ABI",
    # Transactions
    "TransactionOrchestrator",
    "TransactionRecord",
    "TxStage",
    "classify_submit_error",
    # Inventory
    "InventorySnapshot",
    "refresh",
    # Controller
    "ChainContext",
    "DappController",
    "Event",
    # Errors
    "HammerDappError",
    "ProviderInitError",
    "ConnectError",
    "SubmitError",
    "ReadError",
    "ProviderInitErrorKind",
    "ConnectErrorKind",
    "SubmitErrorKind",
    "ReadErrorKind",
    # Wallet
    "LocalKeyWallet",
    "WalletError",
    "WalletSigner",
    "discover_wallet",
    # Units
    "format_ether",
    "parse_ether",
]

from .chain.abi import HAMMER_ABI
from .core.binding import ContractBinding, SentTransaction, bind
from .core.context import ChainContext
from .core.controller import DappController, Event
from .core.errors import (
    ConnectError,
    ConnectErrorKind,
    HammerDappError,
    ProviderInitError,
    ProviderInitErrorKind,
    ReadError,
    ReadErrorKind,
    SubmitError,
    SubmitErrorKind,
)
from .core.orchestrator import (
    TransactionOrchestrator,
    TransactionRecord,
    TxStage,
    classify_submit_error,
)
from .core.poller import InventorySnapshot, refresh
from .core.provider import MODE_PROFILES, AccessMode, AccessProvider, ModeProfile, TxKind, initialize
from .core.session import Session, SessionManager, SessionState, classify_connect_error
from .units import format_ether, parse_ether
from .wallet.injected import LocalKeyWallet, WalletError, WalletSigner, discover_wallet
