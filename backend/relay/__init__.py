"""Relay — typed procedure router with a batched RPC transport and caching client.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
