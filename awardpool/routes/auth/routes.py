import logging

from flask import jsonify
from flask_login import current_user, login_required, login_user, logout_user
from flask_wtf.csrf import generate_csrf

from awardpool import db, limiter, login_manager
from awardpool.forms.auth import LoginForm, RegistrationForm
from awardpool.models import Admin
from awardpool.routes.auth import bp
from awardpool.services import limits_service

logger = logging.getLogger(__name__)


@login_manager.user_loader
def load_user(admin_id):
    return db.session.get(Admin, int(admin_id))


@login_manager.unauthorized_handler
def unauthorized():
    return jsonify({"error": "Unauthorized"}), 401


@bp.route("/csrf-token")
def csrf_token():
    """Token the client echoes back in the X-CSRFToken header"""
    return jsonify({"csrf_token": generate_csrf()})


@bp.route("/register", methods=["POST"])
@limiter.limit("5 per hour")
def register():
    form = RegistrationForm().validate_or_raise()

    limits_service.can_create_admin()

    admin = Admin.create_admin(form.username.data, form.password.data)
    login_user(admin)

    logger.info(f"Registered admin {admin.id} ({admin.username})")
    return jsonify(admin.to_dict())


@bp.route("/login", methods=["POST"])
@limiter.limit("10 per minute")
def login():
    form = LoginForm().validate_or_raise()

    admin = Admin.authenticate(form.username.data, form.password.data)
    if admin is None:
        logger.warning(f"Failed login for username '{form.username.data}'")
        return jsonify({"error": "Invalid credentials"}), 401

    login_user(admin)
    return jsonify(admin.to_dict())


@bp.route("/logout", methods=["POST"])
def logout():
    logout_user()
    return jsonify({"success": True})


@bp.route("/me")
@login_required
def me():
    return jsonify(current_user.to_dict())
