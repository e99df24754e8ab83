"""API Layer: reference remote store serving the /todos REST surface.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - All endpoints return structured JSON responses (or 204 with no body)

Design Decisions:
    - Thin routes delegate to TodoBackend; the backend is swappable per app
"""
