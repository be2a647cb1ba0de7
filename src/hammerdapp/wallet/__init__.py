"""
Wallet - local-key wallet endpoint and key storage.

- keys:     load / generate / save the secp256k1 key
- injected: EIP-1193 style endpoint with user approval and signing
"""
