"""Infrastructure Layer — database, logging and outbound HTTP clients.

Invariants:
    - All external calls bounded by a timeout
"""
