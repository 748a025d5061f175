import logging
from functools import wraps

from flask import current_app, jsonify
from flask_login import current_user, login_required

from awardpool.errors import Forbidden
from awardpool.routes.stats import bp
from awardpool.services import limits_service
from awardpool.utils.request_utils import json_body

logger = logging.getLogger(__name__)


def site_admin_required(f):
    """Restrict a view to the configured site admin account"""

    @wraps(f)
    @login_required
    def decorated_function(*args, **kwargs):
        if current_user.username != current_app.config.get("SITE_ADMIN_USERNAME"):
            raise Forbidden("Access denied")
        return f(*args, **kwargs)

    return decorated_function


@bp.route("")
@site_admin_required
def site_stats():
    return jsonify(limits_service.get_site_stats())


@bp.route("/limits")
@site_admin_required
def limits():
    return jsonify(limits_service.get_usage_stats())


@bp.route("/limits", methods=["PUT"])
@site_admin_required
def update_limits():
    data = json_body()
    system_config = limits_service.update_system_config(**data)
    logger.info(f"Site admin {current_user.username} updated limits")
    return jsonify(system_config.to_dict())
