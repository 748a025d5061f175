"""
Shared fixtures: an app on the testing config (in-memory SQLite, CSRF and
rate limiting off, SimpleCache), a test client and seeded ballot data.
"""

import pytest

from awardpool import create_app, db
from awardpool.models import Admin
from awardpool.services import category_service, lobby_service


@pytest.fixture
def app():
    app = create_app("testing")

    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin(app):
    return Admin.create_admin("host", "secret123")


@pytest.fixture
def other_admin(app):
    return Admin.create_admin("intruder", "secret123")


@pytest.fixture
def ballot(app):
    """
    Two categories with nominees.

    Returns a dict keyed by short names: ``picture`` and ``actor`` for the
    categories, and nominee names for the nominees.
    """
    picture = category_service.create_category("Best Picture")
    actor = category_service.create_category("Best Actor")

    nominees = {
        "oppenheimer": category_service.add_nominee(picture.id, "Oppenheimer"),
        "barbie": category_service.add_nominee(picture.id, "Barbie"),
        "poor_things": category_service.add_nominee(picture.id, "Poor Things"),
        "murphy": category_service.add_nominee(actor.id, "Cillian Murphy"),
        "giamatti": category_service.add_nominee(actor.id, "Paul Giamatti"),
    }

    return {"picture": picture, "actor": actor, **nominees}


@pytest.fixture
def lobby(admin):
    return lobby_service.create_lobby(admin.id, "Office Pool")


@pytest.fixture
def make_picks(ballot):
    """Build a prediction payload covering both ballot categories"""

    def build(picture="oppenheimer", actor="murphy"):
        return [
            {"category_id": ballot["picture"].id, "nominee_id": ballot[picture].id},
            {"category_id": ballot["actor"].id, "nominee_id": ballot[actor].id},
        ]

    return build
