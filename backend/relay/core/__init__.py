"""Core Layer — procedure contracts, validation, outcomes, wire codec. No IO, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, client/ or db/
    - Validation and encoding are pure and deterministic

Design Decisions:
    - Functional core separated from imperative shell: the registry and
      transport (services/) orchestrate async work around these pieces
"""
