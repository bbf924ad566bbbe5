# SQLModel definitions - imported here to ensure metadata is populated for create_all.
from .base import UUIDMixin, TimestampMixin  # noqa: F401
from .user import User  # noqa: F401
from .organisation import Organisation  # noqa: F401
from .user_organisation import UserOrganisation  # noqa: F401
