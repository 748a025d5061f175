"""
Category/winner registry tests.

Coverage:
- Category creation order and reorder
- Winner exclusivity, replacement and clearing
- Nominee uniqueness
- Delete cascades into predictions
- Bulk import partial success
- Ballot cache invalidation
"""

import pytest

from awardpool.errors import Conflict, InvalidInput, NotFound
from awardpool.models import Category, Nominee, Prediction
from awardpool.services import category_service, submission_service


def _winner_ids(category):
    return [n.id for n in Nominee.query.filter_by(category_id=category.id, is_winner=True)]


class TestCategories:
    def test_appended_in_creation_order(self, ballot):
        categories = category_service.list_categories()

        assert [c.name for c in categories] == ["Best Picture", "Best Actor"]
        assert [c.display_order for c in categories] == [0, 1]

    def test_first_category_starts_at_zero(self, app):
        category = category_service.create_category("Best Score")

        assert category.display_order == 0

    def test_blank_name_rejected(self, app):
        with pytest.raises(InvalidInput):
            category_service.create_category("  ")

    def test_update_renames_and_moves(self, ballot):
        category_service.update_category(ballot["actor"].id, "Best Lead Actor", -1)

        assert [c.name for c in category_service.list_categories()] == [
            "Best Lead Actor",
            "Best Picture",
        ]

    def test_reorder_full_set(self, ballot):
        category_service.reorder_categories([ballot["actor"].id, ballot["picture"].id])

        categories = category_service.list_categories()
        assert [c.id for c in categories] == [ballot["actor"].id, ballot["picture"].id]
        assert [c.display_order for c in categories] == [0, 1]

    def test_partial_reorder_rejected(self, ballot):
        with pytest.raises(InvalidInput):
            category_service.reorder_categories([ballot["actor"].id])

        assert [c.id for c in category_service.list_categories()] == [
            ballot["picture"].id,
            ballot["actor"].id,
        ]

    def test_reorder_with_duplicates_rejected(self, ballot):
        with pytest.raises(InvalidInput):
            category_service.reorder_categories(
                [ballot["actor"].id, ballot["actor"].id, ballot["picture"].id]
            )

    @pytest.mark.parametrize(
        "ordered_ids", [[[1], {"id": 2}], ["1", "2"], [True, False], "1,2"]
    )
    def test_reorder_rejects_non_id_values(self, ballot, ordered_ids):
        with pytest.raises(InvalidInput):
            category_service.reorder_categories(ordered_ids)

    def test_delete_category_cascades(self, ballot, lobby, make_picks):
        submission_service.submit_predictions(lobby.id, "Ana", make_picks())

        category_service.delete_category(ballot["picture"].id)

        assert Category.query.count() == 1
        assert Nominee.query.filter_by(category_id=ballot["picture"].id).count() == 0
        assert [p.category_id for p in Prediction.query.all()] == [ballot["actor"].id]


class TestNominees:
    def test_duplicate_name_in_category(self, ballot):
        with pytest.raises(Conflict):
            category_service.add_nominee(ballot["picture"].id, "Barbie")

    def test_same_name_in_other_category(self, ballot):
        nominee = category_service.add_nominee(ballot["actor"].id, "Barbie")

        assert nominee.category_id == ballot["actor"].id

    def test_unknown_category(self, app):
        with pytest.raises(NotFound):
            category_service.add_nominee(999, "Nobody")

    def test_delete_nominee_removes_its_predictions(self, ballot, lobby, make_picks):
        submission_service.submit_predictions(lobby.id, "Ana", make_picks())
        submission_service.submit_predictions(
            lobby.id, "Ben", make_picks(picture="barbie")
        )

        category_service.delete_nominee(
            ballot["oppenheimer"].id, category_id=ballot["picture"].id
        )

        assert Prediction.query.filter_by(nominee_id=ballot["oppenheimer"].id).count() == 0
        assert Prediction.query.count() == 3

    def test_delete_nominee_wrong_category(self, ballot):
        with pytest.raises(NotFound):
            category_service.delete_nominee(
                ballot["murphy"].id, category_id=ballot["picture"].id
            )


class TestWinners:
    def test_set_winner(self, ballot):
        category_service.set_winner(ballot["picture"].id, ballot["oppenheimer"].id)

        assert _winner_ids(ballot["picture"]) == [ballot["oppenheimer"].id]

    def test_changing_winner_keeps_one(self, ballot):
        category_service.set_winner(ballot["picture"].id, ballot["oppenheimer"].id)
        category_service.set_winner(ballot["picture"].id, ballot["barbie"].id)

        assert _winner_ids(ballot["picture"]) == [ballot["barbie"].id]

    def test_set_winner_does_not_touch_other_categories(self, ballot):
        category_service.set_winner(ballot["actor"].id, ballot["murphy"].id)
        category_service.set_winner(ballot["picture"].id, ballot["barbie"].id)

        assert _winner_ids(ballot["actor"]) == [ballot["murphy"].id]

    def test_nominee_from_other_category_rejected(self, ballot):
        with pytest.raises(NotFound):
            category_service.set_winner(ballot["picture"].id, ballot["murphy"].id)

        assert _winner_ids(ballot["picture"]) == []

    def test_clear_winner_resets_only_that_category(self, ballot):
        category_service.set_winner(ballot["picture"].id, ballot["oppenheimer"].id)
        category_service.set_winner(ballot["actor"].id, ballot["giamatti"].id)

        category_service.clear_winner(ballot["picture"].id)

        assert all(not n.is_winner for n in ballot["picture"].nominees)
        assert _winner_ids(ballot["actor"]) == [ballot["giamatti"].id]

    def test_current_winners(self, ballot):
        category_service.set_winner(ballot["actor"].id, ballot["murphy"].id)

        winners = category_service.current_winners()

        assert {cid: n.id for cid, n in winners.items()} == {
            ballot["actor"].id: ballot["murphy"].id
        }

    def test_current_winners_prefers_lowest_id_if_store_is_inconsistent(
        self, app, ballot
    ):
        from awardpool import db

        ballot["barbie"].is_winner = True
        ballot["oppenheimer"].is_winner = True
        db.session.commit()

        winners = category_service.current_winners()

        assert winners[ballot["picture"].id].id == ballot["oppenheimer"].id


class TestBulkImport:
    def test_creates_in_order_after_existing(self, ballot):
        result = category_service.bulk_import(
            [
                {"name": "Best Director", "nominees": ["Nolan", "Lanthimos"]},
                {"name": "Best Score", "nominees": []},
            ]
        )

        assert result == {"categories_created": 2, "nominees_created": 2}
        assert [c.name for c in category_service.list_categories()] == [
            "Best Picture",
            "Best Actor",
            "Best Director",
            "Best Score",
        ]

    def test_duplicate_nominee_skipped(self, app):
        result = category_service.bulk_import(
            [
                {
                    "name": "Best Song",
                    "nominees": ["What Was I Made For?", "What Was I Made For?", "Ken"],
                }
            ]
        )

        assert result == {"categories_created": 1, "nominees_created": 2}
        assert Nominee.query.count() == 2

    @pytest.mark.parametrize(
        "items",
        [
            "not a list",
            [{"nominees": []}],
            [{"name": "Best Song"}],
            [{"name": "Best Song", "nominees": [""]}],
            ["Best Song"],
        ],
    )
    def test_malformed_payload_creates_nothing(self, app, items):
        with pytest.raises(InvalidInput):
            category_service.bulk_import(items)

        assert Category.query.count() == 0


class TestBallotCache:
    def test_ballot_reflects_winner_change(self, ballot):
        first = category_service.categories_with_nominees()
        assert first[0]["winner_id"] is None

        category_service.set_winner(ballot["picture"].id, ballot["barbie"].id)

        second = category_service.categories_with_nominees()
        assert second[0]["winner_id"] == ballot["barbie"].id

    def test_ballot_reflects_new_category(self, ballot):
        assert len(category_service.categories_with_nominees()) == 2

        category_service.create_category("Best Director")

        assert len(category_service.categories_with_nominees()) == 3
