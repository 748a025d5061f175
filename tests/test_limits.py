"""
Participation limit tests.

Coverage:
- Defaults seeded from the app config
- Updates clamp to hard caps and reject bad values
- Admin, lobby and participant limit checks
- Usage and site stats
"""

import pytest

from awardpool.errors import InvalidInput, LimitExceeded
from awardpool.models import Admin, SystemConfig
from awardpool.services import limits_service, lobby_service, submission_service


class TestSystemConfig:
    def test_defaults_from_config(self, app):
        system_config = limits_service.get_system_config()

        assert system_config.max_admins == app.config["DEFAULT_MAX_ADMINS"]
        assert (
            system_config.max_lobbies_per_admin
            == app.config["DEFAULT_MAX_LOBBIES_PER_ADMIN"]
        )
        assert (
            system_config.max_participants_per_lobby
            == app.config["DEFAULT_MAX_PARTICIPANTS_PER_LOBBY"]
        )

    def test_single_row(self, app):
        limits_service.get_system_config()
        limits_service.get_system_config()

        assert SystemConfig.query.count() == 1

    def test_update_partial(self, app):
        limits_service.update_system_config(max_lobbies_per_admin=3)

        system_config = limits_service.get_system_config()
        assert system_config.max_lobbies_per_admin == 3
        assert system_config.max_admins == app.config["DEFAULT_MAX_ADMINS"]

    def test_update_clamped_to_hard_cap(self, app):
        system_config = limits_service.update_system_config(
            max_participants_per_lobby=10_000
        )

        assert (
            system_config.max_participants_per_lobby
            == limits_service.HARD_CAPS["max_participants_per_lobby"]
        )

    @pytest.mark.parametrize(
        "changes",
        [
            {"max_admins": 0},
            {"max_admins": -5},
            {"max_admins": "ten"},
            {"max_admins": True},
            {"max_teams": 4},
        ],
    )
    def test_invalid_updates(self, app, changes):
        with pytest.raises(InvalidInput):
            limits_service.update_system_config(**changes)


class TestLimitChecks:
    def test_admin_limit(self, admin):
        limits_service.update_system_config(max_admins=1)

        with pytest.raises(LimitExceeded):
            limits_service.can_create_admin()

    def test_lobby_limit(self, admin, other_admin):
        limits_service.update_system_config(max_lobbies_per_admin=1)
        lobby_service.create_lobby(admin.id, "Only one")

        with pytest.raises(LimitExceeded):
            limits_service.can_create_lobby(admin.id)

        limits_service.can_create_lobby(other_admin.id)

    def test_participant_limit(self, lobby, make_picks):
        limits_service.update_system_config(max_participants_per_lobby=1)
        submission_service.submit_predictions(lobby.id, "Ana", make_picks())

        with pytest.raises(LimitExceeded):
            limits_service.can_add_participant(lobby.id)


class TestStats:
    def test_usage_stats(self, admin, lobby):
        stats = limits_service.get_usage_stats()

        assert stats["usage"]["admins"]["current"] == 1
        assert stats["usage"]["lobbies"]["current"] == 1
        assert stats["hard_caps"] == limits_service.HARD_CAPS

    def test_site_stats(self, admin, other_admin, lobby, make_picks):
        submission_service.submit_predictions(lobby.id, "Ana", make_picks())
        submission_service.submit_predictions(lobby.id, "Ben", make_picks())
        lobby_service.create_lobby(other_admin.id, "Quiet")

        stats = limits_service.get_site_stats()

        assert stats["totals"] == {"admins": 2, "lobbies": 2, "participants": 2}
        assert stats["top_lobbies"][0] == {
            "id": lobby.id,
            "name": "Office Pool",
            "participant_count": 2,
        }
        top_admin = stats["top_admins"][0]
        assert top_admin["username"] == admin.username
        assert top_admin["lobby_count"] == 1
        assert top_admin["total_participants"] == 2
        assert Admin.query.count() == 2
