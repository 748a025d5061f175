"""
Lobby lifecycle: creation, status transitions and participant management.

Every mutation requires the caller to be the admin who owns the lobby.
"""

import logging

from flask import current_app
from sqlalchemy import func

from awardpool import db
from awardpool.errors import Forbidden, InvalidInput, NotFound
from awardpool.models import Lobby, Participant
from awardpool.utils.db_utils import atomic
from awardpool.utils.request_utils import is_id

logger = logging.getLogger(__name__)


def get_lobby(lobby_id):
    """Fetch a lobby or raise NotFound"""
    lobby = db.session.get(Lobby, lobby_id) if lobby_id else None
    if lobby is None:
        raise NotFound("Lobby not found")
    return lobby


def get_owned_lobby(lobby_id, admin_id):
    """Fetch a lobby the admin owns, raising NotFound or Forbidden"""
    lobby = get_lobby(lobby_id)
    if lobby.admin_id != admin_id:
        logger.warning(f"Admin {admin_id} attempted to modify lobby {lobby_id}")
        raise Forbidden("Not authorized")
    return lobby


def create_lobby(admin_id, name):
    """Create an open lobby. Callers check the lobby limit first."""
    name = (name or "").strip()
    if not name:
        raise InvalidInput("Lobby name required")

    with atomic():
        lobby = Lobby(
            admin_id=admin_id,
            name=name,
            id_length=current_app.config.get("LOBBY_ID_LENGTH", 10),
        )
        db.session.add(lobby)

    logger.info(f"Admin {admin_id} created lobby {lobby.id} ({lobby.name})")
    return lobby


def list_admin_lobbies(admin_id):
    """Lobbies owned by the admin, newest first, with participant counts"""
    rows = (
        db.session.query(Lobby, func.count(Participant.id))
        .outerjoin(Participant, Participant.lobby_id == Lobby.id)
        .filter(Lobby.admin_id == admin_id)
        .group_by(Lobby.id)
        .order_by(Lobby.created_at.desc())
        .all()
    )

    result = []
    for lobby, participant_count in rows:
        data = lobby.to_dict()
        data["participant_count"] = participant_count
        result.append(data)
    return result


def _transition(lobby, action):
    previous = lobby.status

    with atomic():
        getattr(lobby, action)()

    logger.info(f"Lobby {lobby.id} {action}: {previous} -> {lobby.status}")
    return lobby


def lock_lobby(lobby_id, admin_id):
    """Stop accepting submissions and reveal picks"""
    return _transition(get_owned_lobby(lobby_id, admin_id), "lock")


def unlock_lobby(lobby_id, admin_id):
    """Reopen a locked lobby"""
    return _transition(get_owned_lobby(lobby_id, admin_id), "unlock")


def complete_lobby(lobby_id, admin_id):
    """Mark the lobby completed; completed lobbies cannot be reopened"""
    return _transition(get_owned_lobby(lobby_id, admin_id), "complete")


def operator_transition(lobby_id, action):
    """Apply lock/unlock/complete without an ownership check (management CLI)"""
    if action not in ("lock", "unlock", "complete"):
        raise InvalidInput(f"Unknown lobby action: {action}")
    return _transition(get_lobby(lobby_id), action)


def list_participants(lobby_id):
    """Participants of a lobby in submission order"""
    get_lobby(lobby_id)
    return (
        Participant.query.filter_by(lobby_id=lobby_id)
        .order_by(Participant.submitted_at, Participant.id)
        .all()
    )


def delete_participant(lobby_id, participant_id, admin_id):
    """Remove one participant and their predictions"""
    get_owned_lobby(lobby_id, admin_id)

    participant = db.session.get(Participant, participant_id)
    if participant is None or participant.lobby_id != lobby_id:
        raise NotFound("Participant not found")

    with atomic():
        db.session.delete(participant)

    logger.info(f"Deleted participant {participant_id} from lobby {lobby_id}")


def delete_participants(lobby_id, participant_ids, admin_id):
    """
    Remove several participants of one lobby.

    Ids that do not belong to the lobby are ignored. Returns the number of
    participants actually deleted.
    """
    get_owned_lobby(lobby_id, admin_id)

    if not isinstance(participant_ids, (list, tuple)) or not all(
        is_id(participant_id) for participant_id in participant_ids
    ):
        raise InvalidInput("participant_ids must be an array of participant ids")
    if not participant_ids:
        return 0

    participants = Participant.query.filter(
        Participant.lobby_id == lobby_id, Participant.id.in_(participant_ids)
    ).all()

    with atomic():
        for participant in participants:
            db.session.delete(participant)

    logger.info(f"Deleted {len(participants)} participants from lobby {lobby_id}")
    return len(participants)


def delete_lobby(lobby_id, admin_id):
    """Delete a lobby with its participants and predictions"""
    lobby = get_owned_lobby(lobby_id, admin_id)

    with atomic():
        db.session.delete(lobby)

    logger.info(f"Admin {admin_id} deleted lobby {lobby_id}")
