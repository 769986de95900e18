"""Database Infrastructure — SQLAlchemy declarative Base.

Invariants:
    - Engines are owned by infrastructure/datastore.SQLDatastore, not by this package
"""
