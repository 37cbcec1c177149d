from functools import wraps
from flask import g

from utils.errors import ForbiddenError, UnauthorizedError

PROVIDER = "PROVIDER"
CUSTOMER = "CUSTOMER"

def require_roles(*role_names: str):
    """
    Usage: @require_roles("PROVIDER")
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            user = getattr(g, "user", None)
            if user is None:
                raise UnauthorizedError()

            if not any(user.has_role(name) for name in role_names):
                raise ForbiddenError()

            return fn(*args, **kwargs)
        return wrapper
    return decorator
