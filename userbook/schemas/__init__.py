"""View Schemas: Pydantic view-models handed to the template renderer.

Invariants:
    - View-models carry display data only; they never reach the repository
    - Domain User values from core/ are embedded as-is
"""
