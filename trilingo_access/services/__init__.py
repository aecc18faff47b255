"""Services Layer - typed resource methods, the only sanctioned entry points for callers.

Invariants:
    - No service constructs raw httpx requests; everything goes through AccessClient
    - No service re-implements status-code branching (core/classify_error.py owns it)
"""
