"""
Scoring helpers for the leaderboard.

Scoring is a pure function of a participant's predictions and the current
winner map: one point per prediction that matches its category's announced
winner. Categories without a winner neither score nor penalize.
"""

import unicodedata


def pick_outcome(nominee_id, winner_id):
    """
    Result of a single pick.

    Returns:
        None when no winner is announced for the category,
        otherwise True/False by nominee equality
    """
    if winner_id is None:
        return None
    return nominee_id == winner_id


def count_correct_picks(predictions, winners):
    """
    Count predictions that match the announced winner of their category.

    Args:
        predictions: iterable of (category_id, nominee_id) pairs
        winners: mapping of category_id -> winning nominee_id
    """
    return sum(
        1
        for category_id, nominee_id in predictions
        if pick_outcome(nominee_id, winners.get(category_id)) is True
    )


def collation_key(name):
    """
    Sort key approximating a locale-aware name comparison.

    Base letters compare first, ignoring accents and case, so "Émile" sorts
    next to "Emile" and before "Zoe". Accents break ties among equal base
    letters; the exact string makes the order total.
    """
    decomposed = unicodedata.normalize("NFKD", name).casefold()
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return (base, decomposed, name)


def leaderboard_sort_key(entry):
    return (-entry["score"], collation_key(entry["name"]))


def sort_entries(entries):
    """Sort leaderboard entries by score descending, then by name"""
    return sorted(entries, key=leaderboard_sort_key)


def assign_ranks(entries):
    """
    Assign competition ranks ("1224") to entries already in leaderboard order.

    Entries with equal scores share a rank; the next lower score gets
    1 + the number of entries above it. Returns new dicts with ``rank`` set.
    """
    ranked = []
    previous_score = None
    current_rank = 0

    for position, entry in enumerate(entries, start=1):
        if entry["score"] != previous_score:
            current_rank = position
            previous_score = entry["score"]
        ranked.append({**entry, "rank": current_rank})

    return ranked
