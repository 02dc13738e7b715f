# Overview: Flask API routes for auth operations; parses input and returns JSON responses.

"""
Authentication API routes

- POST /api/auth/register creates the owner and their store together
- POST /api/auth/login issues an opaque bearer token
- POST /api/auth/logout revokes it
"""

from flask import Blueprint, request, jsonify, current_app, g

from ..decorators import require_auth
from ..errors import LedgerError, UnauthorizedError, ValidationError
from ..services import auth_service
from ..services import session_service
from . import error_response, internal_error_response


auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@auth_bp.post("/register")
def register_route():
    try:
        data = request.get_json(silent=True)
        user, store = auth_service.register_owner(data)
        return jsonify({
            "message": "User registered successfully",
            "user": user.to_dict(),
            "store": store.to_dict(),
        }), 201
    except LedgerError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to register user")
        return internal_error_response()


@auth_bp.post("/login")
def login_route():
    """
    Authenticate user and create session token.

    Token must be included in the Authorization header for protected routes.
    """
    try:
        data = request.get_json(silent=True) or {}
        email = data.get("email")
        password = data.get("password")

        if not email or not password:
            return error_response(ValidationError("email and password required"))

        user = auth_service.authenticate(email, password)
        if not user:
            return error_response(UnauthorizedError("Invalid credentials"))

        session, token = session_service.create_session(user.id)
        current_app.logger.info("User %s logged in (store=%s)", user.id, session.store_id)

        return jsonify({
            "user": user.to_dict(),
            "token": token,
            "session": session.to_dict(),
            "storeId": session.store_id,
            "message": "Login successful",
        }), 200
    except LedgerError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to login user")
        return internal_error_response()


@auth_bp.post("/logout")
@require_auth
def logout_route():
    try:
        session_service.revoke_session(g.auth_token, reason="User logout")
        return jsonify({"message": "Logout successful"}), 200
    except Exception:
        current_app.logger.exception("Failed to logout user")
        return internal_error_response()


@auth_bp.get("/me")
@require_auth
def me_route():
    store = g.current_user.store
    return jsonify({
        "user": g.current_user.to_dict(),
        "store": store.to_dict() if store else None,
    }), 200
