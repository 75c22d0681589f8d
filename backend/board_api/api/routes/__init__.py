"""Route Modules — one file per resource/concern.

Invariants:
    - Each module defines its own APIRouter with prefix and tags
    - Routes let unexpected errors propagate to the global failure interceptor
"""
