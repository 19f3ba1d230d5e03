"""Route Dependencies: hand the app's injected collaborators to route handlers.

Invariants:
    - Collaborators live on app.state (set by create_app / lifespan), never in module globals
    - A missing repository is a startup bug and raises RuntimeError
"""

from fastapi import Request
from fastapi.templating import Jinja2Templates

from userbook.core.repository_protocols import UserRepository


def get_user_repository(request: Request) -> UserRepository:
    repository = getattr(request.app.state, "repository", None)
    if repository is None:
        raise RuntimeError("Database not initialized")
    return repository


def get_templates(request: Request) -> Jinja2Templates:
    return request.app.state.templates
