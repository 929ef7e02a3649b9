"""Core app configuration, database, roles and security."""

from bloghub.core.config import get_settings, settings
from bloghub.core.database import get_db
from bloghub.core.roles import Role, is_admin

__all__ = ["get_settings", "settings", "get_db", "Role", "is_admin"]
