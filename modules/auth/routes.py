import logging

from flask import Blueprint, jsonify, request
from flask_login import (
    LoginManager,
    login_required,
    login_user,
    logout_user,
    current_user,
)

from models import User, db
from modules.common.http import api_error, json_body, str_field

log = logging.getLogger(__name__)

auth_bp = Blueprint("auth", __name__)
login_manager = LoginManager()

MIN_PASSWORD_LEN = 6
PROFILE_FIELDS = {
    # JSON key -> column
    "name": "name",
    "education": "education",
    "currentRole": "current_role",
    "experienceLevel": "experience_level",
}
PROFILE_LIST_FIELDS = {
    "interests": "interests",
    "careerGoals": "career_goals",
}


@login_manager.user_loader
def load_user(user_id):
    try:
        return db.session.get(User, int(user_id))
    except Exception:
        return None


@login_manager.unauthorized_handler
def unauthorized():
    return api_error("Unauthorized", 401)


def _normalize_email(email) -> str:
    return email.strip().lower() if isinstance(email, str) else ""


def _clean_list(val):
    if isinstance(val, str):
        val = val.split(",")
    if not isinstance(val, list):
        return None
    return [str(v).strip()[:120] for v in val if str(v).strip()][:20]


# ---------------------------
# Password-based Register/Login
# ---------------------------

@auth_bp.route("/register", methods=["POST"])
def register():
    payload = json_body()
    name = str_field(payload, "name")
    email = _normalize_email(payload.get("email"))
    pw = payload.get("password")
    if not isinstance(pw, str):
        pw = ""

    if not (name and email and pw):
        return api_error("Name, email and password are required", 400)
    if len(pw) < MIN_PASSWORD_LEN:
        return api_error(f"Password must be at least {MIN_PASSWORD_LEN} characters", 400)
    if User.query.filter_by(email=email).first():
        return api_error("Email already registered", 400)

    try:
        u = User(name=name[:120], email=email)
        u.set_password(pw)
        db.session.add(u)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        log.exception("Register failed for %s", email)
        return api_error("Registration failed", 500, e)

    login_user(u)
    log.info("New user registered id=%s", u.id)
    return jsonify({"ok": True, "user": u.to_dict()}), 201


@auth_bp.route("/login", methods=["POST"])
def login():
    payload = json_body()
    email = _normalize_email(payload.get("email"))
    pw = payload.get("password")
    if not isinstance(pw, str):
        pw = ""

    u = User.query.filter_by(email=email).first()
    if not u or not u.check_password(pw):
        return api_error("Invalid credentials", 401)

    login_user(u)
    return jsonify({"ok": True, "user": u.to_dict()})


@auth_bp.route("/logout", methods=["POST"])
@login_required
def logout():
    logout_user()
    return jsonify({"ok": True, "message": "Logged out"})


# ---------------------------
# Current user / profile
# ---------------------------

@auth_bp.route("/me", methods=["GET"])
@login_required
def me():
    return jsonify({"ok": True, "user": current_user.to_dict()})


@auth_bp.route("/me", methods=["PATCH"])
@login_required
def update_me():
    """Profile fields only; email and password are not editable here."""
    payload = json_body()

    updates = {}
    for key, col in PROFILE_FIELDS.items():
        if key in payload:
            raw = payload.get(key)
            updates[col] = raw.strip() if isinstance(raw, str) else ""
    if "name" in updates and not updates["name"]:
        return api_error("Name cannot be empty", 400)

    for key, col in PROFILE_LIST_FIELDS.items():
        if key in payload:
            cleaned = _clean_list(payload.get(key))
            if cleaned is None:
                return api_error(f"{key} must be a list of strings", 400)
            updates[col] = cleaned

    try:
        for col, val in updates.items():
            setattr(current_user, col, val if val != "" else None)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        log.exception("Profile update failed for user %s", current_user.id)
        return api_error("Failed to update profile", 500, e)

    return jsonify({"ok": True, "user": current_user.to_dict()})
