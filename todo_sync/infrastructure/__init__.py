"""Infrastructure Layer: remote store client and cross-cutting concerns.

Invariants:
    - Infrastructure never imports from services/ or api/
    - Every transport exception is mapped to the core error hierarchy
"""
