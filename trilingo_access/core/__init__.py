"""Core Layer - pure access-layer logic, no IO, no async, no network.

Invariants:
    - No module in core/ imports from services/, infrastructure/, models/ or db/
    - All functions are pure and deterministic (randomness injected by callers)

Design Decisions:
    - Functional core separated from imperative shell: retry policy, dispatch
      state machine and error classification are testable without fakes
"""
