# Overview: Request decorators for API routes.

from functools import wraps
from flask import request, jsonify, g

from .errors import UnauthorizedError
from .services import session_service


def _unauthorized(message: str):
    return jsonify(UnauthorizedError(message).to_dict()), 401


def require_auth(f):
    """
    Require authentication and establish tenant context.

    Sets the following Flask g attributes:
    - g.current_user: The authenticated User object
    - g.store_id: The store owned by that user
    - g.session_context: The full SessionContext object

    Returns 401 if:
    - No Authorization header
    - Invalid, expired or revoked token
    - User account deactivated
    - The user has no store
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        auth_header = request.headers.get("Authorization")

        if not auth_header or not auth_header.startswith("Bearer "):
            return _unauthorized("Authentication required")

        token = auth_header.split(" ", 1)[1]

        context = session_service.validate_session(token)

        if not context:
            return _unauthorized("Invalid or expired token")

        if context.store_id is None:
            return _unauthorized("Store not found for current user")

        g.current_user = context.user
        g.store_id = context.store_id
        g.session_context = context
        g.auth_token = token

        return f(*args, **kwargs)

    return decorated_function
