from flask import jsonify

from awardpool.routes.leaderboard import bp
from awardpool.services import leaderboard_service


@bp.route("/<lobby_id>")
def show(lobby_id):
    """Leaderboard for a lobby (public, polled by the client)"""
    return jsonify(leaderboard_service.get_leaderboard(lobby_id))
