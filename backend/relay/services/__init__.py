"""Services Layer — procedure registry, batch transport, handlers, app router.

Invariants:
    - Handlers split by area (greeting, profiles), one class each
    - The registry uses explicit name -> Procedure mappings (no auto-discovery)
"""
