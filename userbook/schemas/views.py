"""View-Models: data objects rendered by users.html, edit.html and error.html.

Invariants:
    - UserForm holds the raw submitted strings so rejected input is echoed back verbatim
    - error is "" when the view renders without a problem
"""

from pydantic import BaseModel, Field

from userbook.core.domain_types import User
from userbook.core.pagination import PageWindow


class UserForm(BaseModel):
    """Raw name/email/age as typed by the user."""
    name: str = ""
    email: str = ""
    age: str = ""

    @classmethod
    def from_user(cls, user: User) -> "UserForm":
        return cls(name=user.name, email=user.email, age=str(user.age))


class UsersPage(BaseModel):
    """List view: one page of users plus the create form."""
    users: list[User] = Field(default_factory=list)
    form: UserForm = Field(default_factory=UserForm)
    error: str = ""
    page: int = 1
    limit: int = 10
    prev_page: int = 0
    next_page: int = 2

    @classmethod
    def for_window(cls, window: PageWindow, **fields) -> "UsersPage":
        return cls(
            page=window.page,
            limit=window.limit,
            prev_page=window.prev_page,
            next_page=window.next_page,
            **fields,
        )


class EditPage(BaseModel):
    """Edit view for a single user. user_id is None when the id itself was invalid."""
    user_id: int | None = None
    form: UserForm = Field(default_factory=UserForm)
    error: str = ""


class ErrorPage(BaseModel):
    error: str
    status_code: int
