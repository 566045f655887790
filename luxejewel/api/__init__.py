# luxejewel/api/__init__.py
from luxejewel.api.deps import get_current_user, require_admin

__all__ = ["get_current_user", "require_admin"]
