"""ORM Models: SQLAlchemy declarative models.

All models are imported here so Base.metadata is complete before
create_all or Alembic autogenerate runs.
"""

from userbook.models.user import User  # noqa: F401
