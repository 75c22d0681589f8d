"""Pydantic Schemas — request/response validation and outbound report payloads.

Invariants:
    - Schemas validate at system boundary (user input, API responses, collector payload)
"""
