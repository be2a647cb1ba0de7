"""
Fixed deployment constants for the hammer DApp client.

The contract address and remote endpoint are hardcoded; the CLI can point
the remote endpoint elsewhere (``--rpc-url`` / ``HAMMER_RPC_URL``) for local
test chains.
"""

from __future__ import annotations

from pathlib import Path

VERSION = "1.0.0"

HAMMER_CONTRACT_ADDRESS = "0x73486Bf90752aFf35a8Aa402cF922a1faac01Da7"

# Read-only endpoint used when no wallet is involved (Sepolia public node)
REMOTE_RPC_URL = "https://ethereum-sepolia-rpc.publicnode.com"

# Default config directory, holds the wallet key
HAMMERDAPP_DIR = Path.home() / ".hammerdapp"
HAMMERDAPP_ENV = HAMMERDAPP_DIR / ".env"

# Gas limit proposed by the local-key wallet when it builds a transaction
DEFAULT_GAS_LIMIT = 500_000

# Seconds between receipt polls while a transaction is pending
RECEIPT_POLL_INTERVAL = 2.0
