"""API Layer — FastAPI routes, envelope sender, dependencies and error handlers.

Invariants:
    - Routes registered explicitly by RouterRegistry (no auto-discovery)
    - All endpoints answer with the {status, data, meta?} envelope

Design Decisions:
    - Thin routes delegate to services; the pagination engine never sees HTTP
"""
