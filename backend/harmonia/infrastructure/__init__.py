"""Infrastructure Layer — datastore, transport, security and logging adapters.

Invariants:
    - Infrastructure implements the protocols in core/repository_protocols.py
    - All driver exceptions mapped to typed errors from core/errors.py

Design Decisions:
    - Each adapter is an instance owned by the orchestrator (no import-time globals)
"""
