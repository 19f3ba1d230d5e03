"""Users Routes: server-rendered list, edit, create, update and delete.

Invariants:
    - Each request runs: parse/validate -> repository call -> map outcome -> respond
    - Validation rejection and DuplicateEmailError -> 400 with the form re-rendered
      and the submitted values echoed back
    - UserNotFoundError -> 404 "user not found" (including delete of an unknown id)
    - DatabaseError -> 500 "failed to ...", detail logged server-side only
    - Successful writes redirect with 303 See Other
    - No retries anywhere
"""

import logging

from fastapi import APIRouter, Depends, Form, Query, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from pydantic import BaseModel

from userbook.api.deps import get_templates, get_user_repository
from userbook.core.errors import (
    DatabaseError, DuplicateEmailError, InvalidPaginationError,
    InvalidUserIdError, UserInputError, UserNotFoundError,
)
from userbook.core.pagination import PageWindow, resolve_page
from userbook.core.parse_int import parse_int64
from userbook.core.repository_protocols import UserRepository
from userbook.core.validate_user import validate_user_input
from userbook.schemas.views import EditPage, ErrorPage, UserForm, UsersPage

logger = logging.getLogger(__name__)
router = APIRouter(tags=["users"])

FIRST_PAGE = PageWindow()
LIST_URL = "/users"
FIRST_PAGE_URL = f"/users?page={FIRST_PAGE.page}&limit={FIRST_PAGE.limit}"


def _render(
    templates: Jinja2Templates,
    request: Request,
    name: str,
    view: BaseModel,
    status_code: int = status.HTTP_200_OK,
) -> HTMLResponse:
    return templates.TemplateResponse(
        request, name, dict(view), status_code=status_code,
    )


def _parse_user_id(raw_id: str) -> int:
    user_id = parse_int64(raw_id)
    if user_id is None:
        raise InvalidUserIdError(raw_id)
    return user_id


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url, status_code=status.HTTP_303_SEE_OTHER)


@router.get("/", include_in_schema=False)
async def index():
    return _redirect(LIST_URL)


@router.get("/users", response_class=HTMLResponse)
async def list_users(
    request: Request,
    page: str | None = Query(None),
    limit: str | None = Query(None),
    repository: UserRepository = Depends(get_user_repository),
    templates: Jinja2Templates = Depends(get_templates),
):
    """Paginated list with the create form."""
    try:
        window = resolve_page(page, limit)
    except InvalidPaginationError as e:
        return _render(
            templates, request, "users.html",
            UsersPage.for_window(PageWindow(page=e.page), error=e.message),
            status.HTTP_400_BAD_REQUEST,
        )

    try:
        users = await repository.list_users(window.limit, window.offset)
    except DatabaseError as e:
        logger.error(
            f"Failed to fetch users: {e}", exc_info=True,
            extra={"error_code": e.code},
        )
        return _render(
            templates, request, "users.html",
            UsersPage.for_window(window, error="failed to fetch users"),
            status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    return _render(
        templates, request, "users.html",
        UsersPage.for_window(window, users=users),
    )


@router.get("/users/{user_id}", response_class=HTMLResponse)
async def get_user(
    request: Request,
    user_id: str,
    repository: UserRepository = Depends(get_user_repository),
    templates: Jinja2Templates = Depends(get_templates),
):
    """Edit view for one user."""
    try:
        uid = _parse_user_id(user_id)
    except InvalidUserIdError as e:
        return _render(
            templates, request, "edit.html", EditPage(error=e.message),
            e.http_status,
        )

    try:
        user = await repository.get_user(uid)
    except UserNotFoundError as e:
        return _render(
            templates, request, "edit.html", EditPage(error=e.message),
            e.http_status,
        )
    except DatabaseError as e:
        logger.error(
            f"Failed to fetch user {uid}: {e}", exc_info=True,
            extra={"user_id": uid, "error_code": e.code},
        )
        return _render(
            templates, request, "edit.html",
            EditPage(error="failed to fetch user"),
            status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    return _render(
        templates, request, "edit.html",
        EditPage(user_id=user.id, form=UserForm.from_user(user)),
    )


async def _render_first_page(
    request: Request,
    repository: UserRepository,
    templates: Jinja2Templates,
    status_code: int,
    error: str,
    form: UserForm,
) -> HTMLResponse:
    """Re-render the first list page around a rejected create form."""
    try:
        users = await repository.list_users(FIRST_PAGE.limit, FIRST_PAGE.offset)
    except DatabaseError as e:
        logger.error(
            f"Failed to fetch users: {e}", exc_info=True,
            extra={"error_code": e.code},
        )
        return _render(
            templates, request, "users.html",
            UsersPage.for_window(FIRST_PAGE, error="failed to fetch users"),
            status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    return _render(
        templates, request, "users.html",
        UsersPage.for_window(FIRST_PAGE, users=users, form=form, error=error),
        status_code,
    )


@router.post("/users", response_class=HTMLResponse)
async def create_user(
    request: Request,
    name: str = Form(""),
    email: str = Form(""),
    age: str = Form(""),
    repository: UserRepository = Depends(get_user_repository),
    templates: Jinja2Templates = Depends(get_templates),
):
    """Create a user from the list page form."""
    form = UserForm(name=name, email=email, age=age)
    try:
        user = validate_user_input(name, email, age)
    except UserInputError as e:
        return await _render_first_page(
            request, repository, templates, e.http_status, e.message, form,
        )

    try:
        created = await repository.create_user(user)
    except DuplicateEmailError as e:
        return await _render_first_page(
            request, repository, templates, e.http_status, e.message, form,
        )
    except DatabaseError as e:
        logger.error(
            f"Failed to create user: {e}", exc_info=True,
            extra={"error_code": e.code},
        )
        return await _render_first_page(
            request, repository, templates,
            status.HTTP_500_INTERNAL_SERVER_ERROR, "failed to create user", form,
        )

    logger.info(f"Created user {created.id}", extra={"user_id": created.id})
    return _redirect(FIRST_PAGE_URL)


@router.post("/users/{user_id}", response_class=HTMLResponse)
async def update_user(
    request: Request,
    user_id: str,
    name: str = Form(""),
    email: str = Form(""),
    age: str = Form(""),
    repository: UserRepository = Depends(get_user_repository),
    templates: Jinja2Templates = Depends(get_templates),
):
    """Replace name, email and age of an existing user."""
    try:
        uid = _parse_user_id(user_id)
    except InvalidUserIdError as e:
        return _render(
            templates, request, "edit.html", EditPage(error=e.message),
            e.http_status,
        )

    form = UserForm(name=name, email=email, age=age)
    try:
        user = validate_user_input(name, email, age).with_id(uid)
    except UserInputError as e:
        return _render(
            templates, request, "edit.html",
            EditPage(user_id=uid, form=form, error=e.message),
            e.http_status,
        )

    try:
        await repository.update_user(user)
    except (DuplicateEmailError, UserNotFoundError) as e:
        return _render(
            templates, request, "edit.html",
            EditPage(user_id=uid, form=form, error=e.message),
            e.http_status,
        )
    except DatabaseError as e:
        logger.error(
            f"Failed to update user {uid}: {e}", exc_info=True,
            extra={"user_id": uid, "error_code": e.code},
        )
        return _render(
            templates, request, "edit.html",
            EditPage(user_id=uid, form=form, error="failed to update user"),
            status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    logger.info(f"Updated user {uid}", extra={"user_id": uid})
    return _redirect(LIST_URL)


@router.post("/users/{user_id}/delete", response_class=HTMLResponse)
async def delete_user(
    request: Request,
    user_id: str,
    repository: UserRepository = Depends(get_user_repository),
    templates: Jinja2Templates = Depends(get_templates),
):
    """Hard-delete a user. An unknown id is a 404, not a redirect."""
    try:
        uid = _parse_user_id(user_id)
        await repository.delete_user(uid)
    except (InvalidUserIdError, UserNotFoundError) as e:
        return _render(
            templates, request, "error.html",
            ErrorPage(error=e.message, status_code=e.http_status),
            e.http_status,
        )
    except DatabaseError as e:
        logger.error(
            f"Failed to delete user {user_id}: {e}", exc_info=True,
            extra={"error_code": e.code},
        )
        return _render(
            templates, request, "error.html",
            ErrorPage(
                error="failed to delete user",
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            ),
            status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    logger.info(f"Deleted user {uid}", extra={"user_id": uid})
    return _redirect(LIST_URL)
