"""Route Modules — one file per concern (health probes, RPC endpoint).

Invariants:
    - Each module defines its own APIRouter
    - Routes never contain procedure logic (delegate to services)
"""
