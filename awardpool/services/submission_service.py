"""
Participant submissions and the single-participant picks view.

A submission creates one participant and one prediction per current
category in a single transaction; it is only accepted while the lobby is
open and only if the prediction set covers the ballot exactly.
"""

import logging

from sqlalchemy.exc import IntegrityError

from awardpool import db
from awardpool.errors import Conflict, InvalidInput, NotFound
from awardpool.models import Category, Nominee, Participant, Prediction
from awardpool.models.participant import normalize_name
from awardpool.services.category_service import current_winners
from awardpool.services.lobby_service import get_lobby
from awardpool.utils.db_utils import atomic
from awardpool.utils.request_utils import is_id
from awardpool.utils.scoring import pick_outcome

logger = logging.getLogger(__name__)


def _parse_predictions(predictions):
    """Validate the shape of the submitted batch and return (category_id, nominee_id) pairs"""
    if not isinstance(predictions, (list, tuple)) or not predictions:
        raise InvalidInput("Predictions are required")

    pairs = []
    for prediction in predictions:
        if not isinstance(prediction, dict):
            raise InvalidInput("Each prediction must be an object")

        category_id = prediction.get("category_id")
        nominee_id = prediction.get("nominee_id")
        if not is_id(category_id) or not is_id(nominee_id):
            raise InvalidInput(
                "Each prediction needs an integer category_id and nominee_id"
            )
        pairs.append((category_id, nominee_id))

    return pairs


def _check_coverage(pairs):
    """Every current category must have exactly one prediction, and nothing else"""
    category_ids = {category_id for (category_id,) in db.session.query(Category.id)}
    submitted = [category_id for category_id, _ in pairs]

    if len(submitted) != len(set(submitted)):
        raise InvalidInput("Only one prediction per category is allowed")

    unknown = set(submitted) - category_ids
    if unknown:
        raise InvalidInput("Predictions reference unknown categories")

    if set(submitted) != category_ids:
        raise InvalidInput("Please make a prediction for all categories")


def _check_nominees(pairs):
    nominee_ids = [nominee_id for _, nominee_id in pairs]
    nominee_categories = dict(
        db.session.query(Nominee.id, Nominee.category_id).filter(
            Nominee.id.in_(nominee_ids)
        )
    )

    for category_id, nominee_id in pairs:
        if nominee_categories.get(nominee_id) != category_id:
            raise InvalidInput("Invalid nominee selection")


def submit_predictions(lobby_id, participant_name, predictions):
    """
    Register a participant with their full prediction set.

    Raises NotFound for an unknown lobby, StateConflict when the lobby is
    not open, InvalidInput for a bad name or prediction set, and Conflict
    when the name is already taken in the lobby (case-insensitively).
    """
    lobby = get_lobby(lobby_id)
    lobby.ensure_accepting_predictions()

    if not isinstance(participant_name, str) or not participant_name.strip():
        raise InvalidInput("Name is required")
    participant_name = participant_name.strip()
    if len(participant_name) > Participant.MAX_NAME_LENGTH:
        raise InvalidInput(
            f"Name cannot exceed {Participant.MAX_NAME_LENGTH} characters"
        )

    name_key = normalize_name(participant_name)
    if Participant.query.filter_by(lobby_id=lobby.id, name_key=name_key).first():
        logger.warning(
            f"Duplicate participant name '{participant_name}' in lobby {lobby.id}"
        )
        raise Conflict("A participant with this name already exists in this lobby")

    pairs = _parse_predictions(predictions)
    _check_coverage(pairs)
    _check_nominees(pairs)

    try:
        with atomic():
            participant = Participant(lobby=lobby, name=participant_name)
            db.session.add(participant)
            for category_id, nominee_id in pairs:
                db.session.add(
                    Prediction(
                        participant=participant,
                        category_id=category_id,
                        nominee_id=nominee_id,
                    )
                )
    except IntegrityError:
        # A concurrent submission took the name between the check and the insert
        raise Conflict("A participant with this name already exists in this lobby")

    logger.info(
        f"Participant {participant.id} ({participant.name}) submitted "
        f"{len(pairs)} predictions to lobby {lobby.id}"
    )
    return participant


def get_participant_picks(participant_id, lobby_id):
    """
    One record per prediction of a participant, in ballot order.

    ``is_correct`` is None exactly when the category has no announced winner.
    The caller enforces the pick-visibility gate.
    """
    participant = db.session.get(Participant, participant_id)
    if participant is None or participant.lobby_id != lobby_id:
        raise NotFound("Participant not found")

    rows = (
        db.session.query(
            Category.id, Category.name, Nominee.id, Nominee.name
        )
        .select_from(Prediction)
        .join(Category, Prediction.category_id == Category.id)
        .join(Nominee, Prediction.nominee_id == Nominee.id)
        .filter(Prediction.participant_id == participant.id)
        .order_by(Category.display_order, Category.id)
        .all()
    )

    winners = current_winners()

    picks = []
    for category_id, category_name, nominee_id, nominee_name in rows:
        winner = winners.get(category_id)
        winner_id = winner.id if winner else None
        picks.append(
            {
                "category_id": category_id,
                "category_name": category_name,
                "nominee_id": nominee_id,
                "nominee_name": nominee_name,
                "winner_id": winner_id,
                "winner_name": winner.name if winner else None,
                "is_correct": pick_outcome(nominee_id, winner_id),
            }
        )

    return picks
