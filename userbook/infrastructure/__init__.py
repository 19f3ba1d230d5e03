"""Infrastructure Layer: database access, persistence and cross-cutting concerns.

Invariants:
    - Infrastructure never decides HTTP status or user-facing text
    - Driver errors are translated to core/errors.py types before leaving this package
"""
