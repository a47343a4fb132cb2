"""Infrastructure Layer — database, identity and logging adapters.

Invariants:
    - Infrastructure implements core/ protocols; core never imports from here
    - Driver exceptions are mapped to RelayError subclasses before leaving this layer
"""
