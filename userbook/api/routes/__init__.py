"""Route Modules: one file per resource/concern.

Invariants:
    - Each module defines its own APIRouter
    - Routes orchestrate core validation and the repository; they hold no SQL
"""
