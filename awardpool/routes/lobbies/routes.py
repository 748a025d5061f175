import logging

from flask import jsonify
from flask_login import current_user, login_required

from awardpool.forms.lobbies import CreateLobbyForm
from awardpool.routes.lobbies import bp
from awardpool.services import category_service, limits_service, lobby_service
from awardpool.utils.request_utils import json_body

logger = logging.getLogger(__name__)


@bp.route("", methods=["POST"])
@login_required
def create():
    """Create a lobby owned by the current admin"""
    form = CreateLobbyForm().validate_or_raise()

    limits_service.can_create_lobby(current_user.id)

    lobby = lobby_service.create_lobby(current_user.id, form.name.data)
    return jsonify(lobby.to_dict()), 201


@bp.route("/mine")
@login_required
def my_lobbies():
    """Lobbies owned by the current admin"""
    return jsonify(lobby_service.list_admin_lobbies(current_user.id))


@bp.route("/<lobby_id>")
def detail(lobby_id):
    """Public lobby details for the invite link"""
    lobby = lobby_service.get_lobby(lobby_id)
    return jsonify(lobby.to_dict(include_participant_count=True))


@bp.route("/<lobby_id>/categories")
def ballot(lobby_id):
    """Categories and nominees for the prediction form"""
    lobby_service.get_lobby(lobby_id)
    return jsonify(category_service.categories_with_nominees())


@bp.route("/<lobby_id>/participants")
def participants(lobby_id):
    return jsonify(
        [participant.to_dict() for participant in lobby_service.list_participants(lobby_id)]
    )


@bp.route("/<lobby_id>/lock", methods=["PATCH"])
@login_required
def lock(lobby_id):
    lobby = lobby_service.lock_lobby(lobby_id, current_user.id)
    return jsonify(lobby.to_dict())


@bp.route("/<lobby_id>/unlock", methods=["PATCH"])
@login_required
def unlock(lobby_id):
    lobby = lobby_service.unlock_lobby(lobby_id, current_user.id)
    return jsonify(lobby.to_dict())


@bp.route("/<lobby_id>/complete", methods=["PATCH"])
@login_required
def complete(lobby_id):
    lobby = lobby_service.complete_lobby(lobby_id, current_user.id)
    return jsonify(lobby.to_dict())


@bp.route("/<lobby_id>/participants/<int:participant_id>", methods=["DELETE"])
@login_required
def delete_participant(lobby_id, participant_id):
    lobby_service.delete_participant(lobby_id, participant_id, current_user.id)
    return jsonify({"success": True})


@bp.route("/<lobby_id>/participants/bulk-delete", methods=["POST"])
@login_required
def bulk_delete_participants(lobby_id):
    data = json_body()
    deleted = lobby_service.delete_participants(
        lobby_id, data.get("participant_ids"), current_user.id
    )
    return jsonify({"success": True, "deleted_count": deleted})


@bp.route("/<lobby_id>", methods=["DELETE"])
@login_required
def delete(lobby_id):
    lobby_service.delete_lobby(lobby_id, current_user.id)
    return jsonify({"success": True})
