"""Board API Package — CRUD service with a failure-reporting pipeline.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
