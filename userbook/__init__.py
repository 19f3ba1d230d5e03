"""Userbook: server-rendered CRUD service for the users resource.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
