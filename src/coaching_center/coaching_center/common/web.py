"""Helpers shared by the Flask controllers.

The session (`user_id`, `role`, `name`) is filled in by the login layer,
which lives outside this package.
"""

from __future__ import annotations

import logging
from functools import wraps

from flask import jsonify, request, session

from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def fail(message: str, status_code: int):
    return jsonify({"success": False, "message": message}), status_code


def current_role() -> Role:
    return Role(session.get("role"))


def current_user_id() -> str:
    return str(session["user_id"])


def current_user_name() -> str:
    return str(session.get("name") or session["user_id"])


def json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return fail("Please sign in to continue", 401)
        if session.get("role") not in {r.value for r in Role}:
            return fail("Unknown role", 403)
        return view(*args, **kwargs)

    return wrapper


def _role_required(role: Role):
    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return fail("Please sign in to continue", 401)
            if session.get("role") != role.value:
                return fail("You do not have access to this page", 403)
            return view(*args, **kwargs)

        return wrapper

    return decorator


admin_required = _role_required(Role.ADMIN)
teacher_required = _role_required(Role.TEACHER)


def json_errors(view):
    """Translate domain errors into JSON responses; anything else is a 500."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except ValidationError as e:
            return fail(str(e), 400)
        except AuthorizationError as e:
            return fail(str(e), 403)
        except NotFoundError as e:
            return fail(str(e), 404)
        except Exception:
            logger.exception("unhandled error in %s", request.endpoint)
            return fail("Internal error, please try again", 500)

    return wrapper
