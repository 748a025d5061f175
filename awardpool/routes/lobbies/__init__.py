from flask import Blueprint

bp = Blueprint("lobbies", __name__)

from awardpool.routes.lobbies import routes  # noqa: E402, F401
