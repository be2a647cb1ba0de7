"""
Chain - On-chain interaction layer for the hammer DApp client.

Provides an async JSON-RPC client, the hammer contract ABI, and transaction
utilities.

Uses httpx + eth-account + eth-abi instead of the heavyweight web3.py.
"""
