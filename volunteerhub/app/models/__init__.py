"""
ORM model package. Import all models here so Alembic autogenerate
can discover every table through the shared Base metadata.
"""
from app.models.user import User  # noqa: F401
from app.models.activity import Activity  # noqa: F401
from app.models.application import ActivityApplication  # noqa: F401
from app.models.notification import Notification  # noqa: F401
