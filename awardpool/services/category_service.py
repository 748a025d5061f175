"""
Category/winner registry.

Categories are global: every lobby predicts the same ordered ballot. The
registry owns the at-most-one-winner-per-category invariant; the store does
not enforce it, so every winner change clears the category and sets the new
winner inside a single transaction.
"""

import logging

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError

from awardpool import db
from awardpool.errors import Conflict, InvalidInput, NotFound
from awardpool.models import Category, Nominee
from awardpool.utils.cache_utils import (
    BALLOT_CACHE_KEY,
    cached_value,
    invalidate_ballot_cache,
)
from awardpool.utils.db_utils import atomic
from awardpool.utils.request_utils import is_id

logger = logging.getLogger(__name__)


def _clean_name(name, label):
    if not isinstance(name, str) or not name.strip():
        raise InvalidInput(f"{label} name is required")
    return name.strip()


def list_categories():
    """All categories in ballot order"""
    return Category.ordered().all()


@cached_value(BALLOT_CACHE_KEY)
def categories_with_nominees():
    """The ballot: each category with its nominees and announced winner id"""
    return [
        category.to_dict(include_nominees=True) for category in list_categories()
    ]


def get_category(category_id):
    category = db.session.get(Category, category_id)
    if category is None:
        raise NotFound("Category not found")
    return category


def get_nominee(nominee_id):
    nominee = db.session.get(Nominee, nominee_id)
    if nominee is None:
        raise NotFound("Nominee not found")
    return nominee


def _next_display_order():
    max_order = db.session.query(func.max(Category.display_order)).scalar()
    return 0 if max_order is None else max_order + 1


def create_category(name):
    """Append a category at the end of the ballot"""
    name = _clean_name(name, "Category")

    with atomic():
        category = Category(name=name, display_order=_next_display_order())
        db.session.add(category)

    invalidate_ballot_cache()
    logger.info(f"Created category {category.id} ({category.name})")
    return category


def update_category(category_id, name, display_order=None):
    """Rename a category and optionally move it"""
    category = get_category(category_id)
    name = _clean_name(name, "Category")

    if display_order is not None and (
        isinstance(display_order, bool) or not isinstance(display_order, int)
    ):
        raise InvalidInput("display_order must be an integer")

    with atomic():
        category.name = name
        if display_order is not None:
            category.display_order = display_order

    invalidate_ballot_cache()
    logger.info(f"Updated category {category.id} ({category.name})")
    return category


def reorder_categories(ordered_ids):
    """
    Rewrite display_order to each id's position in ``ordered_ids``.

    The sequence must name every current category exactly once.
    """
    if not isinstance(ordered_ids, (list, tuple)) or not all(
        is_id(category_id) for category_id in ordered_ids
    ):
        raise InvalidInput("ordered_ids must be an array of category ids")

    categories = {category.id: category for category in list_categories()}

    if len(ordered_ids) != len(set(ordered_ids)) or set(ordered_ids) != set(
        categories
    ):
        logger.warning(
            f"Rejected partial reorder: got {list(ordered_ids)}, "
            f"expected all of {sorted(categories)}"
        )
        raise InvalidInput("ordered_ids must contain every category exactly once")

    with atomic():
        for position, category_id in enumerate(ordered_ids):
            categories[category_id].display_order = position

    invalidate_ballot_cache()
    logger.info(f"Reordered {len(ordered_ids)} categories")
    return list_categories()


def delete_category(category_id):
    """Delete a category with its nominees and every prediction for it"""
    category = get_category(category_id)

    with atomic():
        db.session.delete(category)

    invalidate_ballot_cache()
    logger.info(f"Deleted category {category_id}")


def add_nominee(category_id, name):
    """Add a nominee; names are unique within a category"""
    category = get_category(category_id)
    name = _clean_name(name, "Nominee")

    if Nominee.query.filter_by(category_id=category.id, name=name).first():
        raise Conflict("Nominee already exists in this category")

    try:
        with atomic():
            nominee = Nominee(category=category, name=name, is_winner=False)
            db.session.add(nominee)
    except IntegrityError:
        raise Conflict("Nominee already exists in this category")

    invalidate_ballot_cache()
    logger.info(f"Added nominee {nominee.id} ({nominee.name}) to category {category.id}")
    return nominee


def delete_nominee(nominee_id, category_id=None):
    """Delete a nominee and every prediction that picked it"""
    nominee = get_nominee(nominee_id)
    if category_id is not None and nominee.category_id != category_id:
        raise NotFound("Nominee not found in this category")

    with atomic():
        db.session.delete(nominee)

    invalidate_ballot_cache()
    logger.info(f"Deleted nominee {nominee_id}")


def _lock_category_nominees(category_id):
    # FOR UPDATE serializes concurrent winner changes on backends that support it
    return (
        Nominee.query.filter_by(category_id=category_id)
        .with_for_update()
        .order_by(Nominee.id)
        .all()
    )


def set_winner(category_id, nominee_id):
    """
    Announce ``nominee_id`` as the winner of ``category_id``.

    Clears every other winner in the category and sets the new one in one
    transaction, so readers never see two winners or a half-applied flip.
    """
    get_category(category_id)
    nominee = db.session.get(Nominee, nominee_id)
    if nominee is None or nominee.category_id != category_id:
        raise NotFound("Nominee not found in this category")

    with atomic():
        for candidate in _lock_category_nominees(category_id):
            candidate.is_winner = candidate.id == nominee_id

    invalidate_ballot_cache()
    logger.info(f"Set winner of category {category_id} to nominee {nominee_id}")
    return nominee


def clear_winner(category_id):
    """Withdraw the announced winner of a category"""
    get_category(category_id)

    with atomic():
        for candidate in _lock_category_nominees(category_id):
            candidate.is_winner = False

    invalidate_ballot_cache()
    logger.info(f"Cleared winner of category {category_id}")


def current_winners():
    """
    Map of category_id -> winning nominee.

    If the store ever holds more than one winner for a category, the lowest
    nominee id wins.
    """
    winners = {}
    for nominee in (
        Nominee.query.filter_by(is_winner=True)
        .order_by(Nominee.category_id, Nominee.id)
        .all()
    ):
        winners.setdefault(nominee.category_id, nominee)
    return winners


def bulk_import(items):
    """
    Create categories and their nominees in the given order.

    ``items`` is a list of ``{"name": str, "nominees": [str, ...]}``. A
    nominee that repeats a name already imported into its category is
    skipped without aborting the rest of the import. Returns the counts created.
    """
    if not isinstance(items, (list, tuple)):
        raise InvalidInput("categories must be an array")

    for index, item in enumerate(items):
        if not isinstance(item, dict):
            raise InvalidInput(f"Item {index}: must be an object")
        if not isinstance(item.get("name"), str) or not item["name"].strip():
            raise InvalidInput(f"Item {index}: name is required and must be a string")
        if not isinstance(item.get("nominees"), list):
            raise InvalidInput(f"Item {index}: nominees must be an array")
        for position, nominee_name in enumerate(item["nominees"]):
            if not isinstance(nominee_name, str) or not nominee_name.strip():
                raise InvalidInput(
                    f"Item {index}, nominee {position}: must be a non-empty string"
                )

    categories_created = 0
    nominees_created = 0
    skipped = 0

    with atomic():
        display_order = _next_display_order()

        for item in items:
            category = Category(name=item["name"].strip(), display_order=display_order)
            db.session.add(category)
            db.session.flush()
            display_order += 1
            categories_created += 1

            seen = set()
            for nominee_name in item["nominees"]:
                nominee_name = nominee_name.strip()
                if nominee_name in seen:
                    skipped += 1
                    continue

                db.session.add(
                    Nominee(category=category, name=nominee_name, is_winner=False)
                )
                seen.add(nominee_name)
                nominees_created += 1

    invalidate_ballot_cache()
    logger.info(
        f"Bulk import created {categories_created} categories and "
        f"{nominees_created} nominees ({skipped} duplicate nominees skipped)"
    )
    return {
        "categories_created": categories_created,
        "nominees_created": nominees_created,
    }
