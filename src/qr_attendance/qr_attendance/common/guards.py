from __future__ import annotations

from functools import wraps

from flask import jsonify, session

from ..classes.model import SchoolClass
from ..classes.repository import ClassRepository
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ValidationError


def current_user_id() -> str:
    return str(session.get("user_id") or "")


def current_role() -> Role | None:
    try:
        return Role(session.get("role"))
    except ValueError:
        return None


def role_required(*roles: Role):
    """JSON guard for API views.

    The session (``user_id``, ``role``) is set by the external login layer.
    """

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return jsonify({"success": False, "message": "Please log in"}), 401

            if roles and current_role() not in roles:
                return jsonify({"success": False, "message": "Forbidden"}), 403

            return view(*args, **kwargs)

        return wrapper

    return decorator


def require_class_access(classes: ClassRepository, class_id: str) -> SchoolClass:
    """The class, if the current teacher teaches it (admins see every class)."""

    school_class = classes.get_by_id(class_id)
    if school_class is None:
        raise ValidationError("Class not found")
    if current_role() == Role.TEACHER and school_class.teacher_id and school_class.teacher_id != current_user_id():
        raise AuthorizationError("You do not teach this class")
    return school_class
