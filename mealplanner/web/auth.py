"""
Session-cookie authentication.

Passwords are hashed with werkzeug; a signed Flask session carries the user
id between requests.
"""

import logging
from functools import wraps

from flask import Blueprint, current_app, jsonify, request, session
from pydantic import ValidationError
from werkzeug.security import generate_password_hash, check_password_hash

from .schemas import SignInRequest, SignUpRequest, validation_message

logger = logging.getLogger(__name__)

auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


def error_response(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def login_required(f):
    """Decorator to require an authenticated session for API routes."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if 'user_id' not in session:
            return error_response("Unauthorized", 401)
        return f(*args, **kwargs)
    return decorated_function


def current_user_id() -> int:
    return session['user_id']


def _db():
    return current_app.extensions["mealplanner"].db


@auth_bp.route('/sign-up', methods=['POST'])
def sign_up():
    """Register a user and open a session for them."""
    try:
        body = SignUpRequest.model_validate(request.get_json(silent=True) or {})
    except ValidationError as e:
        return error_response(validation_message(e), 400)

    db = _db()
    if db.get_user_by_username(body.username):
        return error_response("Username already taken", 409)

    user_id = db.create_user(body.username, generate_password_hash(body.password))
    if not user_id:
        return error_response("Username already taken", 409)

    session.clear()
    session['user_id'] = user_id
    session['username'] = body.username
    logger.info(f"New user registered: {body.username} (ID: {user_id})")

    return jsonify({"success": True, "user": db.get_user_by_id(user_id).to_dict()}), 201


@auth_bp.route('/sign-in', methods=['POST'])
def sign_in():
    """Check credentials and open a session."""
    try:
        body = SignInRequest.model_validate(request.get_json(silent=True) or {})
    except ValidationError as e:
        return error_response(validation_message(e), 400)

    user = _db().get_user_by_username(body.username)
    if not user or not check_password_hash(user.password_hash, body.password):
        logger.info(f"Failed login for {body.username}")
        return error_response("Invalid username or password", 401)

    session.clear()
    session['user_id'] = user.id
    session['username'] = user.username
    logger.info(f"User {user.username} (ID: {user.id}) logged in")

    return jsonify({"success": True, "user": user.to_dict()})


@auth_bp.route('/sign-out', methods=['POST'])
def sign_out():
    """Logout and clear session."""
    username = session.get('username', 'unknown')
    session.clear()
    logger.info(f"User {username} logged out")
    return jsonify({"success": True, "message": "Signed out"})


@auth_bp.route('/session', methods=['GET'])
@login_required
def get_session():
    user = _db().get_user_by_id(current_user_id())
    if not user:
        # Session outlived its user
        session.clear()
        return error_response("Unauthorized", 401)
    return jsonify({"success": True, "user": user.to_dict()})
