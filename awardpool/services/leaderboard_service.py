"""
Leaderboard engine.

The leaderboard is recomputed from scratch on every request: scores are a
pure function of the current predictions and the current winners, so
nothing is cached and no invalidation is needed when winners change.
"""

import logging
from collections import defaultdict

from awardpool import db
from awardpool.models import Category, Participant, Prediction
from awardpool.services.category_service import current_winners
from awardpool.services.lobby_service import get_lobby
from awardpool.utils.performance import timer
from awardpool.utils.scoring import assign_ranks, count_correct_picks, sort_entries

logger = logging.getLogger(__name__)


def _predictions_by_participant(lobby_id):
    rows = (
        db.session.query(
            Prediction.participant_id, Prediction.category_id, Prediction.nominee_id
        )
        .join(Participant, Prediction.participant_id == Participant.id)
        .filter(Participant.lobby_id == lobby_id)
        .all()
    )

    grouped = defaultdict(list)
    for participant_id, category_id, nominee_id in rows:
        grouped[participant_id].append((category_id, nominee_id))
    return grouped


@timer
def get_leaderboard(lobby_id):
    """
    Ranked view of a lobby.

    Returns a dict with ``entries`` (participant_id, name, score,
    correct_picks, total_picks, rank), ``stats`` (total_participants,
    total_categories, categories_announced), ``lobby_name`` and
    ``lobby_status``. Any lobby status is valid input.
    """
    lobby = get_lobby(lobby_id)

    participants = (
        Participant.query.filter_by(lobby_id=lobby.id)
        .order_by(Participant.submitted_at, Participant.id)
        .all()
    )
    total_categories = Category.query.count()
    winners = {
        category_id: nominee.id for category_id, nominee in current_winners().items()
    }
    predictions = _predictions_by_participant(lobby.id)

    entries = []
    for participant in participants:
        picks = predictions.get(participant.id, [])
        correct_picks = count_correct_picks(picks, winners)
        entries.append(
            {
                "participant_id": participant.id,
                "name": participant.name,
                "score": correct_picks,
                "correct_picks": correct_picks,
                "total_picks": len(picks),
            }
        )

    ranked = assign_ranks(sort_entries(entries))

    logger.debug(
        f"Leaderboard for lobby {lobby.id}: {len(ranked)} entries, "
        f"{len(winners)}/{total_categories} categories announced"
    )

    return {
        "entries": ranked,
        "stats": {
            "total_participants": len(participants),
            "total_categories": total_categories,
            "categories_announced": len(winners),
        },
        "lobby_name": lobby.name,
        "lobby_status": lobby.status,
    }
