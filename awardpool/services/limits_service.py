"""
Participation limits.

Creation routes check these before inserting; the core create operations
themselves assume the limits were already checked.
"""

import logging

from flask import current_app
from sqlalchemy import func

from awardpool import db
from awardpool.errors import InvalidInput, LimitExceeded
from awardpool.models import Admin, Category, Lobby, Participant, SystemConfig
from awardpool.utils.db_utils import atomic

logger = logging.getLogger(__name__)

# Hard caps: configured limits are clamped to these
HARD_CAPS = {
    "max_admins": 1000,
    "max_lobbies_per_admin": 50,
    "max_participants_per_lobby": 500,
}


def get_system_config():
    """The limits row, created from the app defaults on first use"""
    system_config = db.session.get(SystemConfig, 1)
    if system_config is None:
        with atomic():
            system_config = SystemConfig(
                id=1,
                max_admins=current_app.config.get("DEFAULT_MAX_ADMINS", 100),
                max_lobbies_per_admin=current_app.config.get(
                    "DEFAULT_MAX_LOBBIES_PER_ADMIN", 10
                ),
                max_participants_per_lobby=current_app.config.get(
                    "DEFAULT_MAX_PARTICIPANTS_PER_LOBBY", 50
                ),
            )
            db.session.add(system_config)
    return system_config


def update_system_config(**changes):
    """
    Update one or more limits. Values are clamped to HARD_CAPS.

    Accepted keys: max_admins, max_lobbies_per_admin, max_participants_per_lobby.
    """
    system_config = get_system_config()

    unknown = set(changes) - set(HARD_CAPS)
    if unknown:
        raise InvalidInput(f"Unknown limit(s): {', '.join(sorted(unknown))}")

    changes = {key: value for key, value in changes.items() if value is not None}
    for key, value in changes.items():
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            raise InvalidInput(f"{key} must be a positive integer")

    with atomic():
        for key, value in changes.items():
            setattr(system_config, key, min(value, HARD_CAPS[key]))

    logger.info(f"Updated limits: {system_config!r}")
    return system_config


def can_create_admin():
    """Raise LimitExceeded if another admin account would exceed the limit"""
    system_config = get_system_config()
    if Admin.query.count() >= system_config.max_admins:
        raise LimitExceeded(
            f"Maximum number of admins reached ({system_config.max_admins}). "
            "Contact the site administrator."
        )


def can_create_lobby(admin_id):
    """Raise LimitExceeded if the admin already has the maximum lobbies"""
    system_config = get_system_config()
    if Lobby.query.filter_by(admin_id=admin_id).count() >= system_config.max_lobbies_per_admin:
        raise LimitExceeded(
            "You have reached the maximum number of lobbies "
            f"({system_config.max_lobbies_per_admin}). "
            "Delete some lobbies to create new ones."
        )


def can_add_participant(lobby_id):
    """Raise LimitExceeded if the lobby is at capacity"""
    system_config = get_system_config()
    count = Participant.query.filter_by(lobby_id=lobby_id).count()
    if count >= system_config.max_participants_per_lobby:
        raise LimitExceeded(
            "This lobby has reached its maximum capacity "
            f"({system_config.max_participants_per_lobby} participants)."
        )


def get_usage_stats():
    """Current usage against the configured limits"""
    system_config = get_system_config()
    admin_count = Admin.query.count()

    top_lobbies = (
        db.session.query(Participant.lobby_id, func.count(Participant.id).label("count"))
        .group_by(Participant.lobby_id)
        .order_by(func.count(Participant.id).desc())
        .limit(10)
        .all()
    )
    top_admins = (
        db.session.query(Lobby.admin_id, func.count(Lobby.id).label("count"))
        .group_by(Lobby.admin_id)
        .order_by(func.count(Lobby.id).desc())
        .limit(10)
        .all()
    )

    return {
        "config": system_config.to_dict(),
        "hard_caps": dict(HARD_CAPS),
        "usage": {
            "admins": {
                "current": admin_count,
                "limit": system_config.max_admins,
                "percentage": round(admin_count / system_config.max_admins * 100),
            },
            "lobbies": {
                "current": Lobby.query.count(),
                "top_admin_counts": [
                    {"admin_id": admin_id, "count": count}
                    for admin_id, count in top_admins
                ],
            },
            "categories": {"current": Category.query.count()},
            "participants": {
                "top_lobby_counts": [
                    {"lobby_id": lobby_id, "count": count}
                    for lobby_id, count in top_lobbies
                ]
            },
        },
    }


def get_site_stats():
    """Site-wide totals with the five busiest lobbies and admins"""
    participant_count = func.count(Participant.id)

    top_lobbies = (
        db.session.query(Lobby.id, Lobby.name, participant_count)
        .outerjoin(Participant, Participant.lobby_id == Lobby.id)
        .group_by(Lobby.id, Lobby.name)
        .order_by(participant_count.desc())
        .limit(5)
        .all()
    )
    top_admins = (
        db.session.query(
            Admin.id,
            Admin.username,
            func.count(func.distinct(Lobby.id)),
            participant_count,
        )
        .outerjoin(Lobby, Lobby.admin_id == Admin.id)
        .outerjoin(Participant, Participant.lobby_id == Lobby.id)
        .group_by(Admin.id, Admin.username)
        .order_by(participant_count.desc())
        .limit(5)
        .all()
    )

    return {
        "totals": {
            "admins": Admin.query.count(),
            "lobbies": Lobby.query.count(),
            "participants": Participant.query.count(),
        },
        "top_lobbies": [
            {"id": lobby_id, "name": name, "participant_count": count}
            for lobby_id, name, count in top_lobbies
        ],
        "top_admins": [
            {
                "id": admin_id,
                "username": username,
                "lobby_count": lobby_count,
                "total_participants": total,
            }
            for admin_id, username, lobby_count, total in top_admins
        ],
    }
