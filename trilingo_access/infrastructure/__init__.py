"""Infrastructure Layer - HTTP channels, retry execution, local storage, logging.

Invariants:
    - Infrastructure never decides policy: it executes what core/ computes
    - All outbound calls go through HttpChannel, wrapped by RetryEngine
"""
