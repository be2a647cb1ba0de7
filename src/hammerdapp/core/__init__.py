"""
Core - connection/session and transaction-lifecycle state machine.

- provider:     access modes, provider initialization, per-mode operations
- session:      wallet connect handshake and session invariant
- binding:      immutable contract handle (read-only or read-write)
- orchestrator: submission lifecycle, status text, error classification
- poller:       inventory snapshot reads
- controller:   wiring, events and the user-facing actions
"""
