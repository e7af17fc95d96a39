"""
Model package.

IMPORTANT (SQLModel metadata):
- `EntityStore.create_schema()` relies on `SQLModel.metadata`, which is
  populated only when the table models are imported.
- This module must import every SQLModel `table=True` model so all tables
  are registered before `create_all` runs.
"""

# Import table models so SQLModel registers them in metadata.
from topichub.subscription.models import Subscription  # noqa: F401
from topichub.topic.models import Topic  # noqa: F401
from topichub.user.models import User, UserEvent  # noqa: F401
