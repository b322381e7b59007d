"""
Route decorators for authentication and authorization.
"""

from functools import wraps
from flask import abort
from flask_login import login_required, current_user


def admin_required(func):
    """
    Decorator to restrict a route to admin console accounts.

    Usage:
        @admin_bp.route('/locations')
        @login_required
        @admin_required
        def list_locations():
            ...
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        if not current_user.is_authenticated or not current_user.is_admin:
            abort(403)
        return func(*args, **kwargs)
    return wrapper


# Re-export login_required for convenience
__all__ = ['login_required', 'admin_required']
