"""Services Layer — imperative shell around the pure core.

Invariants:
    - Services orchestrate IO (datastore, server) around core/ pure functions
    - Services never build HTTP responses; routes translate their errors

Design Decisions:
    - Lifecycle, fault supervision and pagination are separate modules so each
      can be tested with plain fakes
"""
