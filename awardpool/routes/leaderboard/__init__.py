from flask import Blueprint

bp = Blueprint("leaderboard", __name__)

from awardpool.routes.leaderboard import routes  # noqa: E402, F401
