"""Pydantic Schemas — procedure inputs and wire envelopes.

Invariants:
    - Schemas validate at the system boundary (procedure input, batch envelopes)
    - Domain types from core/ used for enum fields

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""
