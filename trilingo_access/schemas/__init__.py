"""Pydantic Schemas - wire contracts for backend requests and responses.

Invariants:
    - Schemas validate at the system boundary (backend payloads, caller input)
    - Field aliases match the backend's JSON names; Python attributes are snake_case
    - Unknown fields are ignored: the backend may add fields without breaking clients

Design Decisions:
    - Separate from models: schemas are API contracts, models are local persistence
"""
