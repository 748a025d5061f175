"""
Leaderboard engine tests.

Coverage:
- Winner announcement scenario
- Tie block with competition ranking
- Categories without winners neither score nor penalize
- Categories added after submissions
- Stats block
"""

import pytest

from awardpool.errors import NotFound
from awardpool.services import (
    category_service,
    leaderboard_service,
    lobby_service,
    submission_service,
)


def _submit(lobby, name, picks):
    return submission_service.submit_predictions(
        lobby.id,
        name,
        [{"category_id": c.id, "nominee_id": n.id} for c, n in picks],
    )


@pytest.fixture
def three_categories(app):
    """Three categories with nominees A and B each"""
    categories = []
    for name in ("Best Picture", "Best Director", "Best Editing"):
        category = category_service.create_category(name)
        a = category_service.add_nominee(category.id, f"{name} A")
        b = category_service.add_nominee(category.id, f"{name} B")
        categories.append((category, a, b))
    return categories


class TestScenarios:
    def test_single_category_winner(self, admin):
        lobby = lobby_service.create_lobby(admin.id, "Pool")
        picture = category_service.create_category("Best Picture")
        a = category_service.add_nominee(picture.id, "A")
        b = category_service.add_nominee(picture.id, "B")
        _submit(lobby, "P1", [(picture, a)])
        _submit(lobby, "P2", [(picture, b)])

        category_service.set_winner(picture.id, a.id)
        board = leaderboard_service.get_leaderboard(lobby.id)

        assert [(e["name"], e["score"], e["rank"]) for e in board["entries"]] == [
            ("P1", 1, 1),
            ("P2", 0, 2),
        ]
        assert board["stats"] == {
            "total_participants": 2,
            "total_categories": 1,
            "categories_announced": 1,
        }

    def test_tie_shares_rank_and_next_skips(self, lobby, three_categories):
        (c1, a1, b1), (c2, a2, b2), (c3, a3, b3) = three_categories
        _submit(lobby, "Carl", [(c1, a1), (c2, b2), (c3, b3)])
        _submit(lobby, "Bob", [(c1, a1), (c2, a2), (c3, b3)])
        _submit(lobby, "Alice", [(c1, a1), (c2, a2), (c3, b3)])

        for category, winner, _ in three_categories:
            category_service.set_winner(category.id, winner.id)
        board = leaderboard_service.get_leaderboard(lobby.id)

        assert [(e["name"], e["score"], e["rank"]) for e in board["entries"]] == [
            ("Alice", 2, 1),
            ("Bob", 2, 1),
            ("Carl", 1, 3),
        ]
        assert board["stats"]["categories_announced"] == 3

    def test_no_winners_everyone_ties_at_zero(self, lobby, three_categories):
        picks = [(c, a) for c, a, _ in three_categories]
        _submit(lobby, "zed", picks)
        _submit(lobby, "Amy", picks)

        board = leaderboard_service.get_leaderboard(lobby.id)

        assert [(e["name"], e["score"], e["rank"]) for e in board["entries"]] == [
            ("Amy", 0, 1),
            ("zed", 0, 1),
        ]
        assert board["stats"]["categories_announced"] == 0

    def test_cleared_winner_stops_scoring(self, lobby, three_categories):
        (c1, a1, _), (c2, a2, _), (c3, a3, _) = three_categories
        _submit(lobby, "Ana", [(c1, a1), (c2, a2), (c3, a3)])
        category_service.set_winner(c1.id, a1.id)

        category_service.clear_winner(c1.id)
        board = leaderboard_service.get_leaderboard(lobby.id)

        assert board["entries"][0]["score"] == 0

    def test_category_added_after_submission(self, lobby, three_categories):
        picks = [(c, a) for c, a, _ in three_categories]
        _submit(lobby, "Early", picks)

        late = category_service.create_category("Best Sound")
        late_winner = category_service.add_nominee(late.id, "Sound A")
        _submit(lobby, "Late", picks + [(late, late_winner)])
        category_service.set_winner(late.id, late_winner.id)

        board = leaderboard_service.get_leaderboard(lobby.id)
        entries = {e["name"]: e for e in board["entries"]}

        assert entries["Early"]["total_picks"] == 3
        assert entries["Late"]["total_picks"] == 4
        assert entries["Late"]["rank"] == 1
        assert entries["Early"]["rank"] == 2
        assert board["stats"]["total_categories"] == 4


class TestLeaderboardShape:
    def test_correct_never_exceeds_total(self, lobby, three_categories):
        picks = [(c, a) for c, a, _ in three_categories]
        _submit(lobby, "Ana", picks)
        for category, winner, _ in three_categories:
            category_service.set_winner(category.id, winner.id)

        board = leaderboard_service.get_leaderboard(lobby.id)

        for entry in board["entries"]:
            assert entry["correct_picks"] == entry["score"]
            assert entry["correct_picks"] <= entry["total_picks"]
            assert entry["total_picks"] <= board["stats"]["total_categories"]

    def test_only_this_lobby(self, admin, lobby, three_categories):
        other = lobby_service.create_lobby(admin.id, "Second")
        picks = [(c, a) for c, a, _ in three_categories]
        _submit(lobby, "Ana", picks)
        _submit(other, "Ben", picks)

        board = leaderboard_service.get_leaderboard(lobby.id)

        assert [e["name"] for e in board["entries"]] == ["Ana"]

    def test_available_in_every_status(self, admin, lobby):
        lobby_service.complete_lobby(lobby.id, admin.id)

        board = leaderboard_service.get_leaderboard(lobby.id)

        assert board["lobby_status"] == "completed"
        assert board["lobby_name"] == "Office Pool"
        assert board["entries"] == []

    def test_unknown_lobby(self, app):
        with pytest.raises(NotFound):
            leaderboard_service.get_leaderboard("missing")
