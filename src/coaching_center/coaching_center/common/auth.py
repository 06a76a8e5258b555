"""Session-based guards for the JSON routes.

Signing in is handled elsewhere. It leaves ``user_id`` (the account), ``role``
and, for students and teachers, ``profile_id`` (the student_id or teacher_id
the account belongs to) in the Flask session. These helpers only read them.
"""

from __future__ import annotations

from functools import wraps

from flask import session

from ..core.enums import Role
from ..core.exceptions import AuthorizationError
from .responses import fail


def current_user_id() -> int:
    return int(session["user_id"])


def current_profile_id() -> int | None:
    """Student or teacher id of the signed-in account, if it has one."""
    value = session.get("profile_id")
    return int(value) if value is not None else None


def current_role() -> Role | None:
    try:
        return Role(session.get("role"))
    except ValueError:
        return None


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return fail("Please sign in to continue", 401)
        return view(*args, **kwargs)

    return wrapper


def roles_required(*roles: Role):
    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return fail("Please sign in to continue", 401)
            if current_role() not in roles:
                raise AuthorizationError("You do not have permission to perform this action")
            return view(*args, **kwargs)

        return wrapper

    return decorator


def admin_required(view):
    return roles_required(Role.ADMIN)(view)
