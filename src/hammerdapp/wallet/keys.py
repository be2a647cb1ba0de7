"""
Local wallet key storage.

The key lives in ``~/.hammerdapp/.env`` as ``PRIVATE_KEY=0x...``.  A key in
that file wins over a ``PRIVATE_KEY`` already exported in the environment.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from dotenv import dotenv_values, set_key
from eth_account import Account
from eth_account.signers.local import LocalAccount

from .. import config

KEY_NAME = "PRIVATE_KEY"


def _key_file(env_path: Optional[Path]) -> Path:
    # resolved at call time so tests can point config elsewhere
    return env_path or config.HAMMERDAPP_ENV


def _with_prefix(private_key: str) -> str:
    return private_key if private_key.startswith("0x") else "0x" + private_key


def generate_eoa() -> tuple[str, str]:
    """Create a fresh secp256k1 account; returns (0x-hex private key, address)."""
    account = Account.create()
    return "0x" + bytes(account.key).hex(), account.address


def save_private_key(private_key: str, env_path: Optional[Path] = None) -> Path:
    """
    Write ``PRIVATE_KEY`` into the key file, leaving its other entries alone.

    Returns:
        Path of the key file
    """
    path = _key_file(env_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.touch(exist_ok=True)
    set_key(path, KEY_NAME, _with_prefix(private_key), quote_mode="never")
    if os.name != "nt":
        path.chmod(0o600)
    return path


def load_private_key(env_path: Optional[Path] = None) -> str:
    """
    Find the wallet key.

    Raises:
        ValueError: If neither the key file nor the environment has one
    """
    path = _key_file(env_path)
    stored = dotenv_values(path).get(KEY_NAME) if path.exists() else None
    private_key = stored or os.environ.get(KEY_NAME)
    if not private_key:
        raise ValueError(
            f"PRIVATE_KEY not found. Run 'hammerdapp keygen' or set "
            f"PRIVATE_KEY in {path}"
        )
    return _with_prefix(private_key)


def get_account(private_key: str) -> LocalAccount:
    """
    Raises:
        ValueError: If the key is not a valid secp256k1 private key
    """
    try:
        return Account.from_key(private_key)
    except Exception as exc:
        raise ValueError(f"Invalid PRIVATE_KEY: {exc}") from exc


def get_address(private_key: str) -> str:
    return get_account(private_key).address
