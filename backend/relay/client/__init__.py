"""Client Layer — batching HTTP client, query cache and generated procedure stubs.

Invariants:
    - Imports from core/ (codec, types) and config only; never from services/ or api/
    - Calls made in the same event-loop tick share one HTTP round trip per method
"""
