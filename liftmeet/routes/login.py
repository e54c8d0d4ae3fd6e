from flask import Blueprint, request, session
from werkzeug.security import check_password_hash

from ..models import User
from .common import api_error, api_success

login_bp = Blueprint("login", __name__, url_prefix="/auth")


@login_bp.route("/login", methods=["POST"])
def login():
    """Start a session for an official; role checks live outside this service"""
    data = request.get_json(silent=True) or {}
    email = (data.get("email") or "").strip()
    password = data.get("password") or ""

    if not email or not password:
        return api_error("Email and password are required", 400)

    user = User.query.filter_by(email=email, is_active=True).first()
    if not user or not check_password_hash(user.password_hash, password):
        return api_error("Invalid email or password", 401)

    session["user_id"] = user.id
    return api_success({"id": user.id, "email": user.email})


@login_bp.route("/logout", methods=["POST"])
def logout():
    session.pop("user_id", None)
    return api_success(None)
