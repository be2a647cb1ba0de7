"""
Commands - CLI command implementations for the hammer DApp client.

Each module corresponds to top-level CLI commands:
- inventory: Show available hammers and the sale price
- trade:     connect, assemble and purchase (wallet mode)
- console:   Interactive session with mode switching
- runtime:   Shared controller construction and output helpers
"""
