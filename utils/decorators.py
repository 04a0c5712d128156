from functools import wraps

from flask_login import current_user

from utils.errors import AuthenticationError, PermissionDenied


def role_required(*roles, message="Unauthorized"):
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            # 1. Check if user is logged in
            if not current_user.is_authenticated:
                raise AuthenticationError("User not authenticated")

            # 2. Check if user has one of the permitted roles
            if current_user.role not in roles:
                raise PermissionDenied(message)

            return func(*args, **kwargs)
        return wrapper
    return decorator
