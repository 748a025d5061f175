import logging

from flask import jsonify, request

from awardpool import limiter
from awardpool.errors import InvalidInput
from awardpool.routes.participants import bp
from awardpool.services import limits_service, lobby_service, submission_service
from awardpool.utils.request_utils import json_body

logger = logging.getLogger(__name__)


@bp.route("/submit", methods=["POST"])
@limiter.limit("30 per minute")
def submit():
    """Submit a full prediction set (public: anyone with the link)"""
    data = json_body()

    lobby_id = data.get("lobby_id")
    if not lobby_id:
        raise InvalidInput("Missing required fields")

    limits_service.can_add_participant(lobby_id)

    participant = submission_service.submit_predictions(
        lobby_id, data.get("participant_name"), data.get("predictions")
    )
    return jsonify(participant.to_dict()), 201


@bp.route("/<int:participant_id>/picks")
def picks(participant_id):
    """A participant's picks, visible once the lobby is locked"""
    lobby_id = request.args.get("lobby_id")
    if not lobby_id:
        raise InvalidInput("lobby_id query parameter is required")

    lobby = lobby_service.get_lobby(lobby_id)
    lobby.ensure_picks_visible()

    return jsonify(submission_service.get_participant_picks(participant_id, lobby.id))
