"""Validation Schemas — declarative field rules for request bodies and queries.

Invariants:
    - Schemas are pure data interpreted by core/validation.Validator
    - One module per resource plus shared query schemas

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""
