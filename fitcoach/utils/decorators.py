from functools import wraps
from flask_jwt_extended import current_user, jwt_required

from fitcoach.utils.errors import Forbidden


def roles_required(*roles):
    """
    Require a valid JWT and, when roles are given, one of those roles.
    The authenticated user is passed to the view as ``current_user``.
    """
    def decorator(view_func):
        @wraps(view_func)
        @jwt_required()
        def wrapper(*args, **kwargs):
            user = current_user
            if roles and user.role not in roles:
                raise Forbidden("Forbidden")
            kwargs['current_user'] = user
            return view_func(*args, **kwargs)
        return wrapper
    return decorator


login_required = roles_required()
