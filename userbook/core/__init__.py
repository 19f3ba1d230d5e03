"""Core Layer: pure domain logic, no IO, no DB.

Invariants:
    - No module in core/ imports from api/, infrastructure/, models/ or db/
    - Validation and pagination functions are pure and deterministic
    - repository_protocols.py declares the persistence contract; it holds no IO itself
"""
